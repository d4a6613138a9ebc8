"""Error kinds raised by the site resolution pipeline."""

from __future__ import annotations

from pathlib import Path


class SiteError(RuntimeError):
    """Base class for site loading and resolution failures."""

    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class NotFoundError(SiteError):
    """Raised when a file, page, theme, font, or menu entry cannot be found."""


class InvalidInputError(SiteError):
    """Raised for requests that are well formed but not allowed."""


class IOFailureError(SiteError):
    """Raised for read, write, or copy faults other than a missing file."""


class ConfigInvalidError(SiteError):
    """Raised when configuration data is malformed or unusable."""


class EmptyRegistryError(NotFoundError, ConfigInvalidError):
    """Raised when loading leaves the page or theme registry empty."""


class StaticCollectionError(IOFailureError):
    """Raised when copying static assets into the output tree fails."""
