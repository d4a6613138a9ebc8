"""CLI entrypoints for ctclsite."""

import logging
import logging.config
import sys
import webbrowser
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from rich.console import Console

from .config import Config, load_config
from .errors import SiteError
from .publish import CheckReport, check_site, write_site
from .server import make_request_handler, serve
from .site import SiteConfig, build_site_config
from .templates import TemplateRenderer

console = Console()
app = typer.Typer(help="Build and preview a site declared as JSON pages and Markdown content.")

ConfigPathOption = Annotated[
    str,
    typer.Option("--config", "-c", help="Path to the site configuration file or its directory."),
]
VerboseFlag = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log debug output."),
]


@app.command()
def check(
    config_path: ConfigPathOption = ".",
    verbose: VerboseFlag = False,
) -> None:
    """Load the site and resolve every page, reporting failures."""
    site = _load_site(config_path, verbose)
    renderer = _renderer(site)
    report = check_site(site, renderer)
    _print_check_report(report)
    raise typer.Exit(code=0 if report.ok else 1)


@app.command()
def build(
    config_path: ConfigPathOption = ".",
    output_dir: Annotated[
        Path,
        typer.Option("--output-dir", "-o", help="Directory that receives the rendered site."),
    ] = Path("public"),
    verbose: VerboseFlag = False,
) -> None:
    """Render every page and copy static assets into the output directory."""
    site = _load_site(config_path, verbose)
    renderer = _renderer(site)
    try:
        written = write_site(site, renderer, output_dir)
    except SiteError as exc:
        console.print(f"[bold red]Build failed[/]: {exc}")
        raise typer.Exit(code=1) from exc
    console.print(f"[bold green]Build complete[/]: {len(written)} page(s) written to {_display_path(output_dir)}")


@app.command(name="serve")
def serve_site(
    config_path: ConfigPathOption = ".",
    host: Annotated[
        str | None,
        typer.Option("--host", help="Host interface to bind; defaults to the configured bindip."),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Port to bind; defaults to the configured bindport."),
    ] = None,
    open_browser: Annotated[
        bool,
        typer.Option(
            "--open-browser/--no-open-browser",
            help="Automatically open the site in a browser after starting.",
        ),
    ] = False,
    verbose: VerboseFlag = False,
) -> None:
    """Serve pages resolved on each request from the loaded site."""
    site = _load_site(config_path, verbose)
    renderer = _renderer(site)
    bind_host = host if host is not None else site.config.bindip
    bind_port = port if port is not None else site.config.bindport
    if bind_port < 0 or bind_port > 65535:
        raise typer.BadParameter("Port must be between 0 and 65535.")

    try:
        handler = make_request_handler(site, renderer)
        with serve(bind_host, bind_port, handler) as server:
            site_url = server.url
            console.print(f"[bold green]Serving[/]: {site_url} (press Ctrl+C to stop)")
            if open_browser:
                webbrowser.open(site_url)
            try:
                server.serve_forever()
            except KeyboardInterrupt:
                console.print("\n[bold yellow]Stopping server...[/]")
    except SiteError as exc:
        console.print(f"[bold red]Cannot serve site[/]: {exc}")
        raise typer.Exit(code=1) from exc
    except OSError as exc:
        console.print(f"[bold red]Failed to start server[/]: {exc}")
        raise typer.Exit(code=1) from exc


def configure_logging(config: Config, *, verbose: bool = False) -> None:
    """Apply the YAML logging configuration when one is set, otherwise a plain stderr setup."""
    if config.logconfig is not None:
        try:
            data: Any = yaml.safe_load(config.logconfig.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise typer.BadParameter(f"Can't load logging config {config.logconfig}: {exc}") from exc
        if not isinstance(data, dict):
            raise typer.BadParameter(f"Logging config {config.logconfig} must be a mapping.")
        data.setdefault("version", 1)
        logging.config.dictConfig(data)
        if verbose:
            logging.getLogger().setLevel(logging.DEBUG)
        return

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _load_site(path: str, verbose: bool) -> SiteConfig:
    try:
        config = load_config(path)
    except SiteError as exc:
        raise typer.BadParameter(str(exc)) from exc
    configure_logging(config, verbose=verbose)
    try:
        return build_site_config(config)
    except SiteError as exc:
        console.print(f"[bold red]Site load failed[/] ({type(exc).__name__}): {exc}")
        raise typer.Exit(code=1) from exc


def _renderer(site: SiteConfig) -> TemplateRenderer:
    try:
        return TemplateRenderer(site.config.templatepath)
    except SiteError as exc:
        console.print(f"[bold red]Templates unavailable[/]: {exc}")
        raise typer.Exit(code=1) from exc


def _print_check_report(report: CheckReport) -> None:
    if report.ok:
        console.print(f"[bold green]Check clean[/]: {report.page_count} page(s) resolved.")
        return
    for issue in report.issues:
        console.print(f"[bold red]{issue.kind}[/] {issue.category}/{issue.page_id} - {issue.message}")
    console.print(
        f"[bold blue]Summary[/]: {len(report.issues)} issue(s) across {report.page_count} page(s)."
    )


def _display_path(path: Path) -> str:
    try:
        return path.resolve().relative_to(Path.cwd()).as_posix()
    except ValueError:
        return path.as_posix()
