"""
Front Matter Validation Schemas

Pydantic models for the YAML metadata block at the top of each Markdown
article. Normalizes the loose shapes authors write (string or list,
string or object) into one canonical form.
"""

import re
import datetime as dt
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models import slugify


_LEADING_DATE_RE = re.compile(r'^(\d{4}-\d{2}-\d{2})')


class ImageSchema(BaseModel):
    """Image object form: ``image: {teaser: ..., opengraph: ...}``."""
    model_config = ConfigDict(str_strip_whitespace=True, extra='ignore')

    teaser: Optional[str] = None
    opengraph: Optional[str] = None

    @model_validator(mode='after')
    def fill_missing_variant(self) -> "ImageSchema":
        """Either variant stands in for the other when only one is given."""
        if self.teaser is None and self.opengraph is None:
            raise ValueError("image needs at least one of teaser or opengraph")
        if self.teaser is None:
            self.teaser = self.opengraph
        if self.opengraph is None:
            self.opengraph = self.teaser
        return self


def _as_list(value) -> List[str]:
    """A string, number or list of them as a list of strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [_as_text(v) for v in value]
    return [_as_text(value)]


def _as_text(value) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValueError(f"expected text, got {value!r}")
    return str(value)


def _dedupe(values: List[str]) -> List[str]:
    seen = []
    for v in values:
        v = v.strip()
        if v and v not in seen:
            seen.append(v)
    return seen


class FrontMatterSchema(BaseModel):
    """
    Validation schema for article front matter.

    Unknown keys are ignored so theme-specific settings don't break the build.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra='ignore')

    title: str = Field(..., min_length=1, description="Article title")
    slug: Optional[str] = Field(default=None, description="Explicit URL slug")
    categories: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    date: Optional[dt.date] = None
    modified: Optional[dt.date] = None
    last_modified_at: Optional[dt.date] = None
    excerpt: Optional[str] = None
    image: Optional[ImageSchema] = None
    authors: List[str] = Field(default_factory=list)
    author: List[str] = Field(default_factory=list)
    sidebar: bool = True
    comments: bool = True
    ads: bool = True
    toc: bool = False
    draft: bool = False

    @field_validator('title', mode='before')
    @classmethod
    def title_to_string(cls, v):
        """YAML turns titles like ``2020`` or ``yes`` into non-strings."""
        if v is None:
            return v
        return str(v)

    @field_validator('categories', 'tags', 'authors', 'author', mode='before')
    @classmethod
    def string_or_list(cls, v) -> List[str]:
        """Accept a single string or a list of strings."""
        return _dedupe(_as_list(v))

    @field_validator('categories', 'tags')
    @classmethod
    def names_have_slugs(cls, v: List[str]) -> List[str]:
        """Every taxonomy term needs a non-empty URL segment."""
        for name in v:
            if not slugify(name):
                raise ValueError(f"{name!r} has no letters or digits to build a URL from")
        return v

    @field_validator('date', 'modified', 'last_modified_at', mode='before')
    @classmethod
    def parse_loose_date(cls, v):
        """Accept dates, datetimes and strings starting with YYYY-MM-DD."""
        if v is None or v == '':
            return None
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, dt.date):
            return v
        match = _LEADING_DATE_RE.match(str(v).strip())
        if not match:
            raise ValueError(f"unrecognised date: {v!r}")
        return match.group(1)

    @field_validator('image', mode='before')
    @classmethod
    def image_string_or_object(cls, v):
        """A bare string is both the teaser and the OpenGraph image."""
        if v is None or v == '':
            return None
        if isinstance(v, str):
            return {'teaser': v, 'opengraph': v}
        return v

    @property
    def author_keys(self) -> List[str]:
        """``authors`` and ``author`` merged, order kept."""
        return _dedupe(self.authors + self.author)

    @property
    def last_modified(self) -> Optional[dt.date]:
        return self.modified or self.last_modified_at


class PageFrontMatterSchema(BaseModel):
    """Front matter for standalone pages (about, privacy, ...)."""
    model_config = ConfigDict(str_strip_whitespace=True, extra='ignore')

    title: str = Field(..., min_length=1)
    slug: Optional[str] = None


class AuthorSchema(BaseModel):
    """One entry of the site-wide author registry."""
    model_config = ConfigDict(str_strip_whitespace=True, extra='ignore')

    name: str = Field(..., min_length=1)
    avatar: Optional[str] = None
    bio: str = ""


def validate_front_matter(data: Union[dict, None]) -> FrontMatterSchema:
    """
    Validate a raw front-matter mapping.

    Args:
        data: Mapping produced by the YAML loader (None for an empty block)

    Returns:
        Validated FrontMatterSchema instance

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return FrontMatterSchema.model_validate(data or {})
