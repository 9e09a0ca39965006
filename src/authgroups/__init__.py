"""AuthGroups - authorization groups and group membership.

Manages named permission groups, their privilege level and admin flag,
and the membership relation between groups and user accounts.
"""

__version__ = "0.1.0"

from authgroups.domain.exceptions import (
    DuplicateName,
    FieldNotFound,
    GroupError,
    GroupNotFound,
    InvalidIdentifier,
    MissingLevel,
    MissingName,
    NoGroupSelected,
)
from authgroups.domain.services import GroupEntity

__all__ = [
    "DuplicateName",
    "FieldNotFound",
    "GroupEntity",
    "GroupError",
    "GroupNotFound",
    "InvalidIdentifier",
    "MissingLevel",
    "MissingName",
    "NoGroupSelected",
    "__version__",
]
