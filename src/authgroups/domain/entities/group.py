"""Group record for authorization groups.

Groups are named authorization buckets carrying a privilege level and an
admin flag. Ordering and comparison of levels belong to the caller.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class GroupRecord:
    """Typed view of one row of the groups table.

    Attributes:
        id: Store-assigned primary key (positive integer).
        name: Group name (globally unique).
        level: Relative privilege rank.
        is_admin: Administrative flag.
    """

    id: int
    name: str
    level: int
    is_admin: bool = False

    def __post_init__(self) -> None:
        """Validate group data after initialization."""
        if not self.id or self.id <= 0:
            raise ValueError("Group ID must be a positive integer")
        if not self.name:
            raise ValueError("Group name is required")

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "GroupRecord":
        """Build a record from a row mapping, ignoring extra columns."""
        return cls(
            id=int(row["id"]),
            name=row["name"],
            level=int(row["level"]),
            is_admin=bool(row.get("is_admin") or False),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
