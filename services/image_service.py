"""
Image Service - Responsive image markup and image URL filters

Emits <picture> markup only for images that actually exist under the
static directory, using whichever width variants are present on disk.
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Sequence, Tuple

from markupsafe import Markup, escape

logger = logging.getLogger(__name__)


class ImageService:
    """Service for image paths and responsive image markup."""

    def __init__(self, static_dir: Path, base_url: str, image_formats: Dict[str, str],
                 widths: Sequence[int] = (320, 640, 960, 1280)):
        """
        Initialize the image service.

        Args:
            static_dir: Directory the image URLs are resolved against
            base_url: Site base URL used by ``absolute_url``
            image_formats: teaser/opengraph prefix and suffix strings
            widths: Candidate widths for ``name-<w>w.<ext>`` variants
        """
        self.static_dir = static_dir
        self.base_url = base_url
        self.image_formats = image_formats
        self.widths = tuple(sorted(widths))

    # ========== URL FILTERS ==========

    def teaser(self, path: str) -> str:
        """Surround an image path with the teaser prefix and suffix."""
        prefix = self.image_formats.get('teaser_prefix', '')
        suffix = self.image_formats.get('teaser_suffix', '')
        return f"{prefix}{path}{suffix}"

    def opengraph(self, path: str) -> str:
        """Surround an image path with the OpenGraph prefix and suffix."""
        prefix = self.image_formats.get('opengraph_prefix', '')
        suffix = self.image_formats.get('opengraph_suffix', '')
        return f"{prefix}{path}{suffix}"

    def absolute_url(self, path: str, base_url: Optional[str] = None) -> str:
        """Join the site base URL and a path with exactly one slash."""
        if path.startswith(('http://', 'https://')):
            return path
        url = (base_url or self.base_url).rstrip('/')
        return f"{url}/{path.lstrip('/')}"

    # ========== FILESYSTEM ==========

    def resolve(self, url_path: str) -> Optional[Path]:
        """Map a site URL path to a file under the static directory, if it exists."""
        if not url_path or url_path.startswith(('http://', 'https://', '//')):
            return None
        relative = PurePosixPath(url_path.lstrip('/'))
        if '..' in relative.parts:
            return None
        candidate = (self.static_dir / relative).resolve()
        try:
            candidate.relative_to(self.static_dir.resolve())
        except ValueError:
            return None
        return candidate if candidate.is_file() else None

    def variants(self, url_path: str, extension: Optional[str] = None) -> List[Tuple[str, int]]:
        """
        Find ``name-<w>w.<ext>`` files next to an image.

        Returns:
            List of (url, width) for the variants present on disk, narrowest first
        """
        source = PurePosixPath(url_path)
        ext = extension or source.suffix
        found = []
        for width in self.widths:
            variant = str(source.with_name(f"{source.stem}-{width}w{ext}"))
            if self.resolve(variant) is not None:
                found.append((variant, width))
        return found

    # ========== MARKUP ==========

    def picture(self, url_path: str, alt: str = "", css_class: str = "",
                sizes: str = "100vw") -> Markup:
        """
        Responsive image markup for ``url_path``.

        Emits <picture> with srcset entries for every variant on disk when
        the image exists; otherwise a plain <img> pointing at the path.
        """
        class_attr = Markup(f' class="{escape(css_class)}"') if css_class else Markup('')

        if self.resolve(url_path) is None:
            logger.debug(f"Image not found, using fallback markup: {url_path}")
            return Markup('<img src="{}" alt="{}"{} loading="lazy">').format(
                url_path, alt, class_attr
            )

        webp = self.variants(url_path, '.webp')
        native = self.variants(url_path)

        parts = [Markup('<picture>')]
        if webp:
            parts.append(Markup('<source type="image/webp" srcset="{}" sizes="{}">').format(
                self._srcset(webp), sizes
            ))
        if native:
            parts.append(Markup('<img src="{}" srcset="{}" sizes="{}" alt="{}"{} loading="lazy">').format(
                url_path, self._srcset(native), sizes, alt, class_attr
            ))
        else:
            parts.append(Markup('<img src="{}" alt="{}"{} loading="lazy">').format(
                url_path, alt, class_attr
            ))
        parts.append(Markup('</picture>'))
        return Markup('').join(parts)

    @staticmethod
    def _srcset(variants: List[Tuple[str, int]]) -> str:
        return ', '.join(f"{url} {width}w" for url, width in variants)
