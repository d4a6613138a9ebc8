"""Site configuration model and loader."""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigInvalidError, IOFailureError, NotFoundError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "ctclsite.json"


class FileType(str, Enum):
    """Classification of page-source files by extension."""

    BINARY = "binary"
    CONFIG = "config"
    IMAGE = "image"
    PDF = "pdf"
    TEXT = "text"
    VIDEO = "video"


class PageCfgPaths(BaseModel):
    """Locations of the per-category page files."""

    model_config = ConfigDict(frozen=True)

    about: Path = Field(default=Path("pages/about.json"))
    blog: Path = Field(default=Path("pages/blog.json"))
    linklist: Path = Field(default=Path("pages/linklist.json"))
    projects: Path = Field(default=Path("pages/projects.json"))
    services: Path = Field(default=Path("pages/services.json"))

    @field_validator("about", "blog", "linklist", "projects", "services", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)


class Config(BaseModel):
    """Parsed top-level site configuration (``ctclsite.json``)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    bindip: str = Field(default="127.0.0.1", description="Address the preview server binds to.")
    bindport: int = Field(default=8000, ge=0, le=65535)
    siteurl: str = Field(default="", description="Base URL prepended to every page link.")
    fontpath: Path | None = Field(default=None)
    jspath: Path | None = Field(default=None)
    pagepath: Path = Field(default=Path("content/pages"))
    staticpath: Path | None = Field(default=None)
    themepath: Path = Field(default=Path("content/themes"))
    templatepath: Path = Field(default=Path("templates"))
    outputpath: Path = Field(default=Path("static"))
    defaulttheme: str = Field(default="default")
    redirects: dict[str, str] = Field(default_factory=dict)
    navbar: list[str] = Field(default_factory=list)
    filetypes: dict[str, FileType] = Field(
        default_factory=dict,
        description="File extension (without dot) to file type.",
    )
    themevars: dict[str, Any] = Field(default_factory=dict)
    uservars: dict[str, Any] = Field(default_factory=dict)
    pagecfgpaths: PageCfgPaths = Field(default_factory=PageCfgPaths)
    logconfig: Path | None = Field(default=None, description="Optional YAML logging configuration.")

    @field_validator("pagepath", "themepath", "templatepath", "outputpath", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("fontpath", "jspath", "staticpath", "logconfig", mode="before")
    def _ensure_optional_path(cls, value: Any) -> Path | None:
        if value is None or value == "":
            return None
        return Path(value)

    @field_validator("siteurl")
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("filetypes", mode="before")
    def _normalize_extensions(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {str(key).strip().lstrip(".").lower(): kind for key, kind in value.items()}

    def filetype(self, path: Path) -> FileType | None:
        """Classify ``path`` by extension; ``None`` when the extension is unknown."""
        suffix = path.suffix.lstrip(".").lower()
        if not suffix:
            return None
        return self.filetypes.get(suffix)


def load_config(path: str | Path) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    The ``path`` argument may point to a file (e.g., ``/site/ctclsite.json``) or a
    directory containing that file. All relative paths inside the configuration
    are interpreted relative to the directory holding the config file.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    if candidate.is_dir():
        # A project directory without a config file runs on defaults.
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            data = _read_json_object(config_file)
        else:
            logger.warning("No %s in %s; using default configuration.", CONFIG_FILENAME, candidate)
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise NotFoundError(f"Config file {candidate} not found", path=candidate)
        data = _read_json_object(candidate)
        base_dir = candidate.parent.resolve()

    try:
        cfg = Config(**data)
    except ValidationError as exc:
        raise ConfigInvalidError(f"Invalid site configuration {candidate}: {exc}", path=candidate) from exc

    def _abs_required(value: Path) -> Path:
        return value if value.is_absolute() else (base_dir / value).resolve()

    def _abs_optional(value: Path | None) -> Path | None:
        if value is None:
            return None
        return _abs_required(value)

    pagecfgpaths = cfg.pagecfgpaths.model_copy(
        update={
            name: _abs_required(getattr(cfg.pagecfgpaths, name))
            for name in ("about", "blog", "linklist", "projects", "services")
        }
    )
    return cfg.model_copy(
        update={
            "pagepath": _abs_required(cfg.pagepath),
            "themepath": _abs_required(cfg.themepath),
            "templatepath": _abs_required(cfg.templatepath),
            "outputpath": _abs_required(cfg.outputpath),
            "fontpath": _abs_optional(cfg.fontpath),
            "jspath": _abs_optional(cfg.jspath),
            "staticpath": _abs_optional(cfg.staticpath),
            "logconfig": _abs_optional(cfg.logconfig),
            "pagecfgpaths": pagecfgpaths,
        }
    )


def _read_json_object(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigInvalidError(f"Malformed JSON in {path}: {exc}", path=path) from exc
    except OSError as exc:
        raise IOFailureError(f"Can't read {path}: {exc}", path=path) from exc
    if not isinstance(data, dict):
        raise ConfigInvalidError(f"{path} does not define an object root", path=path)
    return data
