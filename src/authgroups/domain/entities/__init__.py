"""Domain entities for AuthGroups.

Entities are pure Python dataclasses with no dependency on infrastructure.
"""

from authgroups.domain.entities.group import GroupRecord

__all__ = [
    "GroupRecord",
]
