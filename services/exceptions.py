"""
Site-level exceptions raised by the services.
"""
from pathlib import Path
from typing import Optional


class SiteError(Exception):
    """Base class for content, configuration and build failures."""


class ContentError(SiteError):
    """A content file could not be parsed or validated."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class DuplicateSlugError(ContentError):
    """Two content files resolve to the same URL slug."""

    def __init__(self, slug: str, first: Path, second: Path):
        self.slug = slug
        self.first = first
        self.second = second
        super().__init__(f"slug '{slug}' already used by {first}", path=second)


class DeployConfigError(SiteError):
    """The deployment configuration file is missing or malformed."""


class BuildError(SiteError):
    """A page could not be rendered during the static build."""
