"""Offline package classification database."""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import Removal, UadList
from ..util.logging import get_logger
from ..util.timeutil import last_modified_date

logger = get_logger(__name__)


class ClassificationError(Exception):
    """Classification database could not be loaded."""
    pass


class ClassificationEntry(BaseModel):
    """Classification of a single package."""
    
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    
    uad_list: UadList = Field(default=UadList.UNLISTED, alias="list", description="Curated list documenting the package")
    description: str = Field(default="", description="Human readable description")
    removal: Removal = Field(default=Removal.UNLISTED, description="Removal safety")
    dependencies: List[str] = Field(default_factory=list, description="Packages this one depends on")
    needed_by: List[str] = Field(default_factory=list, alias="neededBy", description="Packages depending on this one")
    labels: List[str] = Field(default_factory=list, description="Free-form labels")


class ClassificationStore:
    """Read-only lookup of package classifications keyed by package name."""
    
    def __init__(self, entries: Dict[str, ClassificationEntry], source: Optional[Path] = None):
        self._entries = dict(entries)
        self.source = source
    
    @classmethod
    def empty(cls) -> "ClassificationStore":
        """Create a store without any classification."""
        return cls({})
    
    @classmethod
    def from_mapping(cls, data: Dict[str, dict], source: Optional[Path] = None) -> "ClassificationStore":
        """Build a store from raw JSON-like data, skipping invalid entries."""
        entries = {}
        
        for name, raw in data.items():
            try:
                entries[name] = ClassificationEntry.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Skipping invalid classification for {name}: {e.error_count()} error(s)")
        
        return cls(entries, source)
    
    @classmethod
    def load(cls, path: Path) -> "ClassificationStore":
        """Load the classification database from a JSON lists file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ClassificationError(f"Failed to load classification lists {path}: {e}") from e
        
        if not isinstance(data, dict):
            raise ClassificationError(f"Classification lists {path} must be a JSON object")
        
        store = cls.from_mapping(data, source=path)
        logger.info(f"Loaded {len(store)} package classifications from {path}")
        return store
    
    def lookup(self, name: str) -> Optional[ClassificationEntry]:
        """Get the classification of a package, if known."""
        return self._entries.get(name)
    
    def last_modified(self) -> Optional[datetime]:
        """Modification time of the backing lists file."""
        if self.source is None:
            return None
        return last_modified_date(self.source)
    
    def __len__(self) -> int:
        return len(self._entries)
    
    def __contains__(self, name: object) -> bool:
        return name in self._entries
