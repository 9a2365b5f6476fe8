"""Exceptions for catalog app.

Invalid input is reported with Django's ``ValidationError``; the errors
below cover unresolvable identifiers and storage failures.
"""


class CatalogError(Exception):
    """Base class for catalog errors."""


class ObjectNotFoundError(CatalogError):
    """Raised when an identifier does not resolve to a stored object."""

    def __init__(self, object_id: object) -> None:
        """Initialize ObjectNotFoundError.

        Args:
            object_id: Identifier that could not be resolved.
        """
        self.object_id = object_id
        super().__init__(f'Stored object not found: {object_id}')


class StoreError(CatalogError):
    """Raised when the object store or metadata database fails."""
