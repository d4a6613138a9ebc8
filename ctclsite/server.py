"""Preview HTTP server that resolves pages from a loaded site snapshot.

Every worker thread reads the same :class:`~ctclsite.site.SiteConfig`; the
snapshot is never mutated after loading, so requests need no locking.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from dataclasses import dataclass
from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Iterator
from urllib.parse import unquote, urlsplit

from .errors import InvalidInputError, NotFoundError, SiteError
from .publish import build_route_table, normalize_link, render_route
from .site import SiteConfig
from .templates import TemplateRenderer

logger = logging.getLogger(__name__)

STATIC_ROUTE = "/static/"


class SiteHTTPServer(ThreadingHTTPServer):
    """Threaded server whose request threads never block interpreter exit."""

    daemon_threads = True

    @property
    def url(self) -> str:
        """Browsable URL; wildcard binds are reported as the loopback address."""
        host, port = self.server_address[:2]
        if isinstance(host, bytes):
            host = host.decode("utf-8", "ignore")
        if host in {"0.0.0.0", "::", ""}:
            host = "127.0.0.1"
        return f"http://{host}:{port}/"


def make_request_handler(site: SiteConfig, renderer: TemplateRenderer) -> type[SimpleHTTPRequestHandler]:
    """Create a request handler serving pages, redirects, and the static tree of ``site``."""
    routes = build_route_table(site)
    redirects = {normalize_link(source): target for source, target in site.config.redirects.items()}
    directory_path = str(site.output_root)

    class SiteRequestHandler(SimpleHTTPRequestHandler):
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            super().__init__(*args, directory=directory_path, **kwargs)

        extensions_map = dict(SimpleHTTPRequestHandler.extensions_map)
        extensions_map.update(
            {
                ".ico": "image/x-icon",
                ".webp": "image/webp",
                ".svg": "image/svg+xml",
                ".json": "application/json; charset=utf-8",
                ".js": "application/javascript; charset=utf-8",
                ".css": "text/css; charset=utf-8",
                ".woff2": "font/woff2",
                ".pdf": "application/pdf",
            }
        )

        def do_GET(self) -> None:
            self._dispatch(head=False)

        def do_HEAD(self) -> None:
            self._dispatch(head=True)

        def log_message(self, format: str, *args: Any) -> None:
            logger.info("%s - %s", self.address_string(), format % args)

        def _dispatch(self, *, head: bool) -> None:
            raw_path = urlsplit(self.path).path
            if raw_path.startswith(STATIC_ROUTE):
                self.path = self.path[len(STATIC_ROUTE) - 1 :]
                if head:
                    super().do_HEAD()
                else:
                    super().do_GET()
                return

            route = normalize_link(unquote(raw_path))
            target = redirects.get(route)
            if target is not None:
                self.send_response(HTTPStatus.MOVED_PERMANENTLY)
                self.send_header("Location", target)
                self.send_header("Content-Length", "0")
                self.end_headers()
                return

            match = routes.get(route)
            if match is None:
                self.send_error(HTTPStatus.NOT_FOUND, f"No page at {route}")
                return

            category, page_id = match
            try:
                html = render_route(site, renderer, category, page_id)
            except InvalidInputError as exc:
                self.send_error(HTTPStatus.BAD_REQUEST, str(exc))
                return
            except NotFoundError as exc:
                self.send_error(HTTPStatus.NOT_FOUND, str(exc))
                return
            except SiteError as exc:
                logger.error("Failed to render %s/%s: %s", category, page_id, exc)
                self.send_error(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
                return

            body = html.encode("utf-8")
            self.send_response(HTTPStatus.OK)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            if not head:
                self.wfile.write(body)

    return SiteRequestHandler


@contextlib.contextmanager
def serve(
    host: str,
    port: int,
    handler: type[SimpleHTTPRequestHandler],
) -> Iterator[SiteHTTPServer]:
    """Bind ``handler`` on ``host:port`` and release the socket on exit.

    The caller runs ``serve_forever`` in its own thread, so nothing is left
    to shut down once the block exits.
    """
    with SiteHTTPServer((host, port), handler) as server:
        yield server


@dataclass(slots=True)
class ServerHandle:
    """A site server answering requests from a daemon thread."""

    server: SiteHTTPServer
    thread: threading.Thread

    @property
    def host(self) -> str:
        return str(self.server.server_address[0])

    @property
    def port(self) -> int:
        return int(self.server.server_address[1])

    @property
    def url(self) -> str:
        return self.server.url

    def stop(self, timeout: float = 2.0) -> None:
        """Stop serving, close the socket, and wait for the thread to finish."""
        self.server.shutdown()
        self.server.server_close()
        self.thread.join(timeout=timeout)


def start_server(
    site: SiteConfig,
    renderer: TemplateRenderer,
    *,
    host: str = "127.0.0.1",
    port: int = 0,
) -> ServerHandle:
    """Serve ``site`` from a background thread; ``port=0`` picks a free port."""
    server = SiteHTTPServer((host, port), make_request_handler(site, renderer))
    thread = threading.Thread(target=server.serve_forever, name=f"ctclsite-{server.server_address[1]}", daemon=True)
    thread.start()
    logger.info("Serving %s from a background thread", server.url)
    return ServerHandle(server=server, thread=thread)
