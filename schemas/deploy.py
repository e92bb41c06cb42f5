"""
Deployment Configuration Schemas

Pydantic models for the hosting platform's TOML configuration: redirect
records, header blocks and per-context build settings.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RedirectSchema(BaseModel):
    """A single ``[[redirects]]`` record."""
    model_config = ConfigDict(str_strip_whitespace=True, extra='ignore')

    from_: str = Field(..., alias='from', min_length=1)
    to: str = Field(..., min_length=1)
    status: int = Field(default=301, ge=200, le=599)
    force: bool = False

    @field_validator('from_')
    @classmethod
    def source_is_absolute(cls, v: str) -> str:
        if not v.startswith('/'):
            raise ValueError(f"redirect source must start with '/': {v!r}")
        return v


class HeaderSchema(BaseModel):
    """A ``[[headers]]`` block with its ``values`` table."""
    model_config = ConfigDict(extra='ignore')

    for_: str = Field(..., alias='for', min_length=1)
    values: Dict[str, str] = Field(default_factory=dict)

    @field_validator('values', mode='before')
    @classmethod
    def stringify_values(cls, v):
        if v is None:
            return {}
        return {str(k): str(val) for k, val in v.items()}


class ContextSchema(BaseModel):
    """A ``[context.<name>]`` table."""
    model_config = ConfigDict(extra='ignore')

    command: str = ""
    environment: Dict[str, str] = Field(default_factory=dict)


class BuildSchema(BaseModel):
    model_config = ConfigDict(extra='ignore')

    publish: str = "public"
    command: str = ""
    environment: Dict[str, str] = Field(default_factory=dict)


class DeployConfigSchema(BaseModel):
    """Top-level deployment configuration document."""
    model_config = ConfigDict(extra='ignore')

    build: Optional[BuildSchema] = None
    redirects: List[RedirectSchema] = Field(default_factory=list)
    headers: List[HeaderSchema] = Field(default_factory=list)
    context: Dict[str, ContextSchema] = Field(default_factory=dict)
