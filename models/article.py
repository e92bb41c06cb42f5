"""
Blog article and author models.
"""
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional


WORDS_PER_MINUTE = 200
_TAG_RE = re.compile(r'<[^>]+>')


def slugify(value: str) -> str:
    """Lowercase, collapse anything that isn't a letter or digit into single dashes.

    Letters outside ASCII are kept, so '日本語' stays '日本語'.
    """
    return re.sub(r'[\W_]+', '-', value.lower()).strip('-')


@dataclass(frozen=True)
class ArticleImage:
    """Teaser and OpenGraph image paths for an article."""
    teaser: str
    opengraph: str


@dataclass
class Author:
    """Represents an author from the site-wide registry."""
    key: str
    display_name: str
    avatar: Optional[str] = None
    bio: str = ""

    @property
    def url(self) -> str:
        return f"/authors/{self.key}/"


@dataclass
class Article:
    """Represents a rendered Markdown article."""
    slug: str
    title: str
    date: date
    body: str
    html: str = ""
    modified: Optional[date] = None
    categories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    excerpt: Optional[str] = None
    image: Optional[ArticleImage] = None
    authors: List[str] = field(default_factory=list)
    toc: bool = False
    toc_html: str = ""
    sidebar: bool = True
    comments: bool = True
    ads: bool = True
    source_path: Optional[Path] = None

    def __post_init__(self):
        if self.modified is None:
            self.modified = self.date

    @property
    def url(self) -> str:
        return f"/{self.slug}/"

    @property
    def formatted_date(self) -> str:
        """Return human-readable date."""
        return self.date.strftime("%B %d, %Y")

    @property
    def was_modified(self) -> bool:
        return self.modified != self.date

    @property
    def plain_text(self) -> str:
        """Rendered HTML with tags stripped, falling back to the raw body."""
        return _TAG_RE.sub('', self.html) if self.html else self.body

    @property
    def reading_time(self) -> int:
        """Estimated reading time in minutes (minimum 1)."""
        words = len(self.plain_text.split())
        return max(1, round(words / WORDS_PER_MINUTE))

    def summary(self, word_count: int = 20) -> str:
        """Front-matter excerpt, or the first ``word_count`` words of the text."""
        if self.excerpt:
            return self.excerpt
        words = self.plain_text.split()
        if len(words) <= word_count:
            return ' '.join(words)
        return ' '.join(words[:word_count]) + '…'

    @property
    def category_slugs(self) -> List[str]:
        return [slugify(c) for c in self.categories]

    @property
    def tag_slugs(self) -> List[str]:
        return [slugify(t) for t in self.tags]


@dataclass
class Page:
    """A standalone page such as /about/ or /privacy/."""
    slug: str
    title: str
    body: str
    html: str = ""
    source_path: Optional[Path] = None

    @property
    def url(self) -> str:
        return f"/{self.slug}/"


@dataclass
class Pagination:
    """One page of a paginated article listing."""
    page: int
    total_pages: int
    articles: List[Article]
    base_path: str = "/"

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def url_for_page(self, page: int) -> str:
        if page == 1:
            return self.base_path
        return f"{self.base_path}page/{page}/"

    @property
    def prev_url(self) -> Optional[str]:
        return self.url_for_page(self.page - 1) if self.has_prev else None

    @property
    def next_url(self) -> Optional[str]:
        return self.url_for_page(self.page + 1) if self.has_next else None
