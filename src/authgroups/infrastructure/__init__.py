"""Infrastructure layer for AuthGroups."""
