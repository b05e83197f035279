from __future__ import annotations

"""
Archetype Domain Models.

Project templates listed in archetype catalogs. Identity is the
(groupId, artifactId) pair; versions accumulate as catalogs are merged.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class Archetype:
    """
    A project template published in an archetype catalog.

    Attributes:
        group_id: Archetype groupId.
        artifact_id: Archetype artifactId.
        repository: Repository URL declared by the catalog entry, if any.
        description: Human readable description, if any.
        versions: Known versions, in first-seen order without repeats.
    """
    group_id: str
    artifact_id: str
    repository: Optional[str] = None
    description: Optional[str] = None
    versions: List[str] = field(default_factory=list)

    @property
    def key(self) -> Tuple[str, str]:
        return self.group_id, self.artifact_id

    @property
    def label(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def latest_version(self) -> Optional[str]:
        """Last version listed by the catalogs (catalogs list ascending)."""
        return self.versions[-1] if self.versions else None
