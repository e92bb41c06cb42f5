"""
Author Service - Site-wide author registry

Articles only hold author keys; this service resolves them to display
name, avatar and bio from a single YAML file.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import ValidationError

from models import Author
from schemas import AuthorSchema
from services.exceptions import ContentError

logger = logging.getLogger(__name__)


class AuthorService:
    """Service for looking up authors by key."""

    def __init__(self, authors_file: Path):
        self.authors_file = authors_file
        self._authors: Dict[str, Author] = {}
        self.reload()

    def reload(self) -> None:
        """Re-read the registry file. A missing file means no authors."""
        self._authors = {}
        if not self.authors_file.exists():
            logger.warning(f"Author registry not found: {self.authors_file}")
            return

        try:
            data = yaml.safe_load(self.authors_file.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ContentError(f"invalid YAML: {e}", path=self.authors_file)

        if not isinstance(data, dict):
            raise ContentError("author registry must be a mapping", path=self.authors_file)

        for key, entry in data.items():
            try:
                schema = AuthorSchema.model_validate(entry or {})
            except ValidationError as e:
                raise ContentError(f"invalid author '{key}': {e}", path=self.authors_file)
            self._authors[str(key)] = Author(
                key=str(key),
                display_name=schema.name,
                avatar=schema.avatar,
                bio=schema.bio,
            )

        logger.info(f"Loaded {len(self._authors)} authors")

    def get(self, key: str) -> Optional[Author]:
        return self._authors.get(key)

    def resolve(self, keys: List[str]) -> List[Author]:
        """Map keys to authors, dropping keys with no registry entry."""
        resolved = []
        for key in keys:
            author = self._authors.get(key)
            if author is None:
                logger.debug(f"Unknown author key: {key}")
                continue
            resolved.append(author)
        return resolved
