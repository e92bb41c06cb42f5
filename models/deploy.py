"""
Deployment configuration models: redirects, header rules and build contexts.
"""
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import Dict, Optional
from urllib.parse import urlparse


def normalize_path(path: str) -> str:
    """Strip a trailing slash so '/book' and '/book/' compare equal."""
    if len(path) > 1 and path.endswith('/'):
        return path.rstrip('/') or '/'
    return path


@dataclass(frozen=True)
class RedirectRule:
    """Old path -> new path mapping applied by the hosting platform."""
    source: str
    destination: str
    status: int = 301
    force: bool = False

    @property
    def is_external(self) -> bool:
        return bool(urlparse(self.destination).scheme)

    def matches(self, path: str) -> bool:
        return normalize_path(self.source) == normalize_path(path)

    def as_line(self) -> str:
        """Render the rule in the plain-text _redirects format."""
        status = f"{self.status}!" if self.force else str(self.status)
        return f"{self.source}  {self.destination}  {status}"


@dataclass
class HeaderRule:
    """Response headers applied to every path matching ``path_pattern``."""
    path_pattern: str
    headers: Dict[str, str] = field(default_factory=dict)

    def matches(self, path: str) -> bool:
        return fnmatchcase(path, self.path_pattern)


@dataclass
class BuildContext:
    """A named build environment (production, deploy-preview, ...)."""
    name: str
    command: str = ""
    base_url: Optional[str] = None
    environment: Dict[str, str] = field(default_factory=dict)

    @property
    def site_env(self) -> Optional[str]:
        return self.environment.get('HUGO_ENV') or self.environment.get('SITE_ENV')
