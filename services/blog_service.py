"""
Blog Service - Handles all blog-related business logic

This service encapsulates article loading from the content store, front
matter parsing, Markdown rendering, table-of-contents extraction and the
listing queries the templates need.
"""

import logging
import math
import re
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import markdown
import yaml
from pydantic import ValidationError

from models import Article, ArticleImage, Page, Pagination, slugify
from schemas import PageFrontMatterSchema, validate_front_matter
from services.exceptions import ContentError, DuplicateSlugError

logger = logging.getLogger(__name__)

_FRONT_MATTER_RE = re.compile(r'\A---\s*\n(.*?)\n---\s*(?:\n|\Z)', re.DOTALL)
_DATE_PREFIX_RE = re.compile(r'^\d{4}-\d{2}-\d{2}-')

MARKDOWN_EXTENSIONS = ['fenced_code', 'tables', 'toc', 'attr_list', 'codehilite']
MARKDOWN_EXTENSION_CONFIGS = {
    'codehilite': {'guess_lang': False, 'css_class': 'highlight'},
    'toc': {'toc_depth': '2-3'},
}


def split_front_matter(text: str) -> Tuple[Optional[str], str]:
    """
    Split a Markdown file into its front-matter block and body.

    Returns:
        Tuple of (front matter YAML or None, body)
    """
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        return None, text
    return match.group(1), text[match.end():]


def slug_from_path(path: Path) -> str:
    """File stem with any Jekyll-style ``YYYY-MM-DD-`` prefix removed."""
    return _DATE_PREFIX_RE.sub('', path.stem)


class BlogService:
    """Service for loading and querying Markdown articles."""

    def __init__(self, posts_dir: Path, pages_dir: Optional[Path] = None,
                 paginate: int = 6, summary_length: int = 20,
                 include_drafts: bool = False):
        """
        Initialize the blog service.

        Args:
            posts_dir: Directory containing article Markdown files
            pages_dir: Directory containing standalone page Markdown files
            paginate: Articles per list page
            summary_length: Words in an auto-generated summary
            include_drafts: Whether ``draft: true`` articles are published
        """
        self.posts_dir = posts_dir
        self.pages_dir = pages_dir
        self.paginate = paginate
        self.summary_length = summary_length
        self.include_drafts = include_drafts
        self._articles: Dict[str, Article] = {}
        self._pages: Dict[str, Page] = {}
        self._md = markdown.Markdown(
            extensions=MARKDOWN_EXTENSIONS,
            extension_configs=MARKDOWN_EXTENSION_CONFIGS,
            output_format='html5',
        )

    # ========== LOADING ==========

    def load(self) -> "BlogService":
        """
        Read every article and page from disk, replacing what was loaded.

        Raises:
            ContentError: A file has malformed front matter
            DuplicateSlugError: Two files map to the same slug
        """
        articles: Dict[str, Article] = {}
        for path in sorted(self.posts_dir.glob('*.md')):
            article = self.parse_article(path)
            if article is None:
                continue
            if article.slug in articles:
                raise DuplicateSlugError(article.slug, articles[article.slug].source_path, path)
            articles[article.slug] = article

        pages: Dict[str, Page] = {}
        if self.pages_dir is not None and self.pages_dir.exists():
            for path in sorted(self.pages_dir.glob('*.md')):
                page = self.parse_page(path)
                if page.slug in pages or page.slug in articles:
                    first = pages[page.slug].source_path if page.slug in pages else articles[page.slug].source_path
                    raise DuplicateSlugError(page.slug, first, path)
                pages[page.slug] = page

        self._articles = articles
        self._pages = pages
        logger.info(f"Loaded {len(articles)} articles and {len(pages)} pages")
        return self

    def reload(self) -> "BlogService":
        return self.load()

    def _read_front_matter(self, path: Path) -> Tuple[dict, str]:
        try:
            text = path.read_text(encoding='utf-8')
        except (FileNotFoundError, PermissionError) as e:
            raise ContentError(f"cannot read file: {e}", path=path)

        raw, body = split_front_matter(text)
        if raw is None:
            return {}, body

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ContentError(f"invalid YAML front matter: {e}", path=path)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ContentError("front matter must be a mapping", path=path)
        return data, body

    def render_markdown(self, body: str) -> Tuple[str, str]:
        """
        Render Markdown to HTML.

        Returns:
            Tuple of (body HTML, table-of-contents HTML)
        """
        self._md.reset()
        html = self._md.convert(body)
        return html, getattr(self._md, 'toc', '')

    def parse_article(self, path: Path) -> Optional[Article]:
        """
        Parse one article file.

        Returns:
            Article, or None for an unpublished draft
        """
        data, body = self._read_front_matter(path)
        try:
            meta = validate_front_matter(data)
        except ValidationError as e:
            raise ContentError(f"invalid front matter: {e}", path=path)

        if meta.draft and not self.include_drafts:
            logger.debug(f"Skipping draft: {path.name}")
            return None
        if meta.date is None:
            raise ContentError("front matter needs a date", path=path)

        html, toc_html = self.render_markdown(body)
        image = None
        if meta.image is not None:
            image = ArticleImage(teaser=meta.image.teaser, opengraph=meta.image.opengraph)

        return Article(
            slug=meta.slug or slug_from_path(path),
            title=meta.title,
            date=meta.date,
            modified=meta.last_modified,
            body=body,
            html=html,
            categories=meta.categories,
            tags=meta.tags,
            excerpt=meta.excerpt,
            image=image,
            authors=meta.author_keys,
            toc=meta.toc,
            toc_html=toc_html if meta.toc else "",
            sidebar=meta.sidebar,
            comments=meta.comments,
            ads=meta.ads,
            source_path=path,
        )

    def parse_page(self, path: Path) -> Page:
        data, body = self._read_front_matter(path)
        try:
            meta = PageFrontMatterSchema.model_validate(data)
        except ValidationError as e:
            raise ContentError(f"invalid front matter: {e}", path=path)
        html, _ = self.render_markdown(body)
        return Page(
            slug=meta.slug or slug_from_path(path),
            title=meta.title,
            body=body,
            html=html,
            source_path=path,
        )

    # ========== QUERIES ==========

    def get_article(self, slug: str) -> Optional[Article]:
        return self._articles.get(slug)

    def get_page(self, slug: str) -> Optional[Page]:
        return self._pages.get(slug)

    def list_pages(self) -> List[Page]:
        return sorted(self._pages.values(), key=lambda p: p.slug)

    def list_articles(self) -> List[Article]:
        """All articles, newest first; ties broken by slug."""
        return sorted(
            self._articles.values(),
            key=lambda a: (-a.date.toordinal(), a.slug)
        )

    def recent(self, count: int) -> List[Article]:
        return self.list_articles()[:count]

    def page_count(self, articles: Optional[List[Article]] = None) -> int:
        total = len(self.list_articles() if articles is None else articles)
        return max(1, math.ceil(total / self.paginate))

    def paginate_articles(self, page: int, articles: Optional[List[Article]] = None,
                          base_path: str = "/") -> Optional[Pagination]:
        """
        Slice a listing into pages of ``paginate`` articles.

        Args:
            page: 1-based page number
            articles: Listing to paginate (defaults to all articles)
            base_path: URL of the first page of the listing

        Returns:
            Pagination, or None when the page number is out of range
        """
        if articles is None:
            articles = self.list_articles()
        total_pages = self.page_count(articles)
        if page < 1 or page > total_pages:
            return None
        start = (page - 1) * self.paginate
        return Pagination(
            page=page,
            total_pages=total_pages,
            articles=articles[start:start + self.paginate],
            base_path=base_path,
        )

    def categories(self) -> Dict[str, int]:
        """Category name -> article count, sorted by name."""
        counts = Counter(c for a in self._articles.values() for c in a.categories)
        return dict(sorted(counts.items(), key=lambda item: item[0].lower()))

    def category_name(self, category_slug: str) -> Optional[str]:
        """Display name for a category slug, or None if no article uses it."""
        for name in self.categories():
            if slugify(name) == category_slug:
                return name
        return None

    def by_category(self, category: str) -> List[Article]:
        """Articles in a category, matched case-insensitively on its slug."""
        wanted = slugify(category)
        return [a for a in self.list_articles() if wanted in a.category_slugs]

    def tags(self) -> Dict[str, int]:
        """Tag name -> article count, sorted by name."""
        counts = Counter(t for a in self._articles.values() for t in a.tags)
        return dict(sorted(counts.items(), key=lambda item: item[0].lower()))

    def tag_name(self, tag_slug: str) -> Optional[str]:
        for name in self.tags():
            if slugify(name) == tag_slug:
                return name
        return None

    def by_tag(self, tag: str) -> List[Article]:
        wanted = slugify(tag)
        return [a for a in self.list_articles() if wanted in a.tag_slugs]

    def by_author(self, author_key: str) -> List[Article]:
        return [a for a in self.list_articles() if author_key in a.authors]

    def author_keys(self) -> List[str]:
        return sorted({k for a in self._articles.values() for k in a.authors})

    def summary(self, article: Article) -> str:
        return article.summary(self.summary_length)

    def get_prev_next_articles(self, article: Article) -> Tuple[Optional[Article], Optional[Article]]:
        """
        Get the chronologically previous (older) and next (newer) articles.

        Args:
            article: The article being displayed

        Returns:
            Tuple of (previous_article, next_article), either can be None
        """
        articles = self.list_articles()
        try:
            index = next(i for i, a in enumerate(articles) if a.slug == article.slug)
        except StopIteration:
            return None, None

        newer = articles[index - 1] if index > 0 else None
        older = articles[index + 1] if index + 1 < len(articles) else None
        return older, newer
