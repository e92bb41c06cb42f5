"""
Services Package

Business logic behind the site: content loading, authors, images,
deployment rules, popups and the static build.
"""

from .blog_service import BlogService
from .author_service import AuthorService
from .image_service import ImageService
from .deploy_service import DeployService
from .popup_service import PopupGate, PopupDecision
from .build_service import BuildService, BuildReport
from .exceptions import SiteError, ContentError, DuplicateSlugError, DeployConfigError, BuildError

__all__ = [
    'BlogService',
    'AuthorService',
    'ImageService',
    'DeployService',
    'PopupGate',
    'PopupDecision',
    'BuildService',
    'BuildReport',
    'SiteError',
    'ContentError',
    'DuplicateSlugError',
    'DeployConfigError',
    'BuildError',
]
