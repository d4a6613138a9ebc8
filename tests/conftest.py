from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from ctclsite.site import SiteConfig, load_site_config

SITE_CONFIG: dict[str, Any] = {
    "bindip": "127.0.0.1",
    "bindport": 8000,
    "siteurl": "https://example.com",
    "fontpath": "fonts",
    "jspath": "js",
    "pagepath": "pages",
    "staticpath": "public_static",
    "themepath": "themes",
    "templatepath": "templates",
    "outputpath": "static",
    "defaulttheme": "dark",
    "redirects": {"/old": "/about"},
    "navbar": ["/", "/about", "/links"],
    "filetypes": {".md": "text", "PNG": "image", "json": "config", "pdf": "pdf"},
    "themevars": {"radius": "4px"},
    "uservars": {"name": "Example"},
    "pagecfgpaths": {
        "about": "config/pages/about.json",
        "blog": "config/pages/blog.json",
        "linklist": "config/pages/linklist.json",
        "projects": "config/pages/projects.json",
        "services": "config/pages/services.json",
    },
}

PAGES: dict[str, dict[str, Any]] = {
    "about": {
        "home": {
            "type": "sections",
            "link": "/",
            "theme": "dark",
            "title": "Home",
            "desc": "Welcome",
            "sections": {
                "intro": {"theme": "dark", "title": "Intro", "content": "intro.md"},
                "more": {
                    "theme": "light",
                    "title": "More",
                    "content": "more.md",
                    "fitscreen": False,
                    "bgimg": "bg.png",
                },
            },
            "menu": ["about", "home"],
        },
        "about": {
            "type": "content",
            "link": "/about",
            "theme": "light",
            "title": "About",
            "content": "about.md",
            "favicon": "static/custom.ico",
            "shownavbar": False,
        },
    },
    "blog": {
        "first-post": {
            "type": "content",
            "link": "/blog/first-post",
            "theme": "dark",
            "title": "First post",
            "content": "blog/first.md",
            "date": "2024-06-30",
        },
    },
    "linklist": {
        "links": {
            "type": "linklist",
            "link": "/links",
            "theme": "dark",
            "title": "Links",
            "cats": {
                "social": {"title": "Social", "theme": "dark"},
                "code": {"title": "Code", "theme": "light"},
            },
            "menu": ["github"],
        },
        "github": {
            "type": "link",
            "link": "https://github.com/example",
            "theme": "dark",
            "title": "GitHub",
            "cat": "code",
            "icon": "github.svg",
            "icontitle": "GitHub profile",
        },
    },
    "projects": {
        "site": {
            "type": "content",
            "link": "/projects/site",
            "theme": "dark",
            "title": "This site",
            "content": "projects/site.md",
        },
    },
    "services": {},
}

MARKDOWN: dict[str, str] = {
    "intro.md": "# Intro heading\n\nHello **world**.\n",
    "more.md": "## More\n\n| a | b |\n|---|---|\n| 1 | 2 |\n",
    "about.md": '# About me\n\nSome <span class="raw">raw</span> text.\n',
    "blog/first.md": "# First\n\nFirst post body.\n",
    "projects/site.md": "# Site\n\nBuilt from JSON.\n",
}

TEMPLATES: dict[str, str] = {
    "content.html": (
        '<title>{{ title }}</title><link rel="icon" href="/{{ favicon }}">'
        "<main>{{ content|safe }}</main>"
        "{% for item in menu or [] %}<a href=\"{{ item.link }}\">{{ item.title }}</a>{% endfor %}"
    ),
    "sections.html": (
        "<title>{{ title }}</title>"
        "{% for name, section in sections.items() %}"
        '<section id="{{ name }}">{{ section.content|safe }}</section>'
        "{% endfor %}"
    ),
    "linklist.html": "<title>{{ title }}</title>{% for id, cat in cats.items() %}<h2>{{ cat.title }}</h2>{% endfor %}",
}


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture
def site_project(tmp_path: Path) -> Path:
    """A complete project tree with themes, fonts, pages, content, and templates."""
    root = tmp_path / "project"
    _write_json(root / "ctclsite.json", SITE_CONFIG)

    _write_json(root / "themes" / "dark.json", {"color": "#202020", "fgcolor": "#ffffff"})
    _write_json(root / "themes" / "light.json", {"color": "#f0e0d0", "fgcolor": "#000000"})

    (root / "fonts" / "inter").mkdir(parents=True)
    (root / "fonts" / "inter" / "Inter.woff2").write_bytes(b"woff2")
    _write_json(root / "fonts" / "inter" / "family.json", {"name": "Inter"})

    _write_text(root / "js" / "main.js", "console.log('hi');\n")
    _write_text(root / "public_static" / "robots.txt", "User-agent: *\n")
    (root / "public_static" / "img").mkdir(parents=True)
    (root / "public_static" / "img" / "logo.png").write_bytes(b"png")

    for name, text in MARKDOWN.items():
        _write_text(root / "pages" / name, text)
    (root / "pages" / "projects" / "shot.png").write_bytes(b"png")
    _write_json(root / "pages" / "projects" / "meta.json", {"secret": True})
    _write_text(root / "pages" / "notes.xyz", "unclassified\n")
    (root / "pages" / "empty").mkdir()

    for category, pages in PAGES.items():
        _write_json(root / "config" / "pages" / f"{category}.json", pages)

    for name, text in TEMPLATES.items():
        _write_text(root / "templates" / name, text)
    return root


@pytest.fixture
def site(site_project: Path) -> SiteConfig:
    return load_site_config(site_project)
