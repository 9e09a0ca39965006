"""Redaction of credential fields from user rows.

User rows leave the group subsystem only after their credential-related
columns have been removed.
"""

from collections.abc import Iterable, Mapping
from typing import Any


class MemberRedactor:
    """Strips sensitive columns from user records.

    Inputs are never mutated; every call returns fresh dictionaries.
    """

    SENSITIVE_FIELDS = frozenset(
        {
            "password",
            "password_reset_hash",
            "temp_password",
            "remember_me",
        }
    )

    @classmethod
    def redact(cls, user: Mapping[str, Any]) -> dict[str, Any]:
        """Return a copy of ``user`` without sensitive fields.

        Args:
            user: A user row mapping.

        Returns:
            A new dict containing only non-sensitive fields.
        """
        return {key: value for key, value in user.items() if key not in cls.SENSITIVE_FIELDS}

    @classmethod
    def redact_all(cls, users: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        return [cls.redact(user) for user in users]

    @classmethod
    def is_redacted(cls, user: Mapping[str, Any]) -> bool:
        """Check that no sensitive field is present in ``user``."""
        return cls.SENSITIVE_FIELDS.isdisjoint(user.keys())
