"""
Validation Schemas Package

Contains Pydantic models for front matter and deployment configuration.
"""

from .front_matter import (
    FrontMatterSchema,
    ImageSchema,
    PageFrontMatterSchema,
    AuthorSchema,
    validate_front_matter,
)
from .deploy import DeployConfigSchema, RedirectSchema, HeaderSchema, ContextSchema

__all__ = [
    'FrontMatterSchema',
    'ImageSchema',
    'PageFrontMatterSchema',
    'AuthorSchema',
    'validate_front_matter',
    'DeployConfigSchema',
    'RedirectSchema',
    'HeaderSchema',
    'ContextSchema',
]
