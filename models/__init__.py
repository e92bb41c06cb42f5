"""
Models package for the Reflectoring site.

Provides data models for articles, authors, deployment rules and popups.
"""
from .article import Article, ArticleImage, Author, Page, Pagination, slugify
from .deploy import RedirectRule, HeaderRule, BuildContext, normalize_path
from .popup import PopupBanner, CookieFlag, PopupDisplay

__all__ = [
    'Article',
    'ArticleImage',
    'Author',
    'Page',
    'Pagination',
    'slugify',
    'RedirectRule',
    'HeaderRule',
    'BuildContext',
    'normalize_path',
    'PopupBanner',
    'CookieFlag',
    'PopupDisplay',
]
