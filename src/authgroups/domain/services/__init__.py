"""Domain services for AuthGroups.

Services hold the group behaviour: resolution, creation, field projection
and redacted membership listing.
"""

from authgroups.domain.services.group_entity import GroupEntity, parse_identifier
from authgroups.domain.services.member_redactor import MemberRedactor

__all__ = [
    "GroupEntity",
    "MemberRedactor",
    "parse_identifier",
]
