"""Exceptions raised by the group subsystem."""

from typing import Any


class GroupError(Exception):
    """Base class for all group-related errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for host applications."""
        return {"error": type(self).__name__, "message": self.message}


class InvalidIdentifier(GroupError):
    """Raised when a numeric group identifier is not positive."""

    def __init__(self, identifier: Any) -> None:
        self.identifier = identifier
        super().__init__(f"Invalid group id: {identifier!r}")


class GroupNotFound(GroupError):
    """Raised when no group matches the requested identifier."""

    def __init__(self, identifier: Any) -> None:
        self.identifier = identifier
        super().__init__(f"Group '{identifier}' does not exist")

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["identifier"] = self.identifier
        return data


class MissingName(GroupError):
    """Raised when a group is created without a name."""

    def __init__(self) -> None:
        super().__init__("A name is required to create a group")


class MissingLevel(GroupError):
    """Raised when a group is created without a level."""

    def __init__(self) -> None:
        super().__init__("A level is required to create a group")


class DuplicateName(GroupError):
    """Raised when creating a group whose name is already taken."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Group '{name}' already exists")


class NoGroupSelected(GroupError):
    """Raised on field access against an entity with no loaded row."""

    def __init__(self) -> None:
        super().__init__("No group is selected")


class FieldNotFound(GroupError):
    """Raised when a requested field is not part of the group row."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"'{field}' was not found in the group object")
