"""Repositories for the group store."""

from authgroups.infrastructure.persistence.repositories.group_repository import GroupRepository

__all__ = ["GroupRepository"]
