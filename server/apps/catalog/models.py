"""Database models for catalog app."""

import uuid
from typing import Final, final, override

from django.db import models

from server.apps.catalog.infrastructure.metadata import (
    display_name,
    get_file_extension,
)

# Constants for field max lengths
# Uploaded names are capped at 255 chars, plus the timestamp prefix
STORED_NAME_MAX_LENGTH: Final = 300
LABEL_MAX_LENGTH: Final = 255


@final
class StoredObject(models.Model):
    """Metadata record of a document kept in the object store.

    The bytes live in the bucket under ``storage_key``; this row is
    written only after the upload has completed, so every row points
    at a fully readable object.
    """

    id = models.UUIDField(  # noqa: WPS125
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    stored_name = models.CharField(
        max_length=STORED_NAME_MAX_LENGTH,
        unique=True,
        help_text='Storage name: {timestamp_ms}_{original filename}',
    )

    # Optional on purpose: rows without a label never match a label filter
    label = models.CharField(  # noqa: DJ001
        max_length=LABEL_MAX_LENGTH,
        null=True,
        blank=True,
        help_text='User-supplied document type',
    )

    upload_date = models.DateTimeField(auto_now_add=True, db_index=True)

    length = models.BigIntegerField(
        default=0,
        help_text='Object size in bytes',
    )

    class Meta:
        """Model metadata."""

        verbose_name = 'Stored object'  # type: ignore[mutable-override]
        verbose_name_plural = 'Stored objects'  # type: ignore[mutable-override]
        ordering = ['-upload_date']

        indexes = [
            # Optimize label filter queries
            models.Index(
                fields=['label'],
                name='catalog_label_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.stored_name

    @property
    def storage_key(self) -> str:
        """Bucket key holding the object's bytes."""
        return object_key(self.id)

    def get_extension(self) -> str:
        """Extract file extension.

        Example: '1718000000000_report.PDF' -> 'pdf'

        Returns:
            Extension without dot (lowercase).
        """
        return get_file_extension(self.stored_name)

    def get_display_name(self) -> str:
        """Original filename without the timestamp prefix.

        Returns:
            Filename as it was uploaded.
        """
        return display_name(self.stored_name)


def object_key(object_id: uuid.UUID) -> str:
    """Build the bucket key for an object id.

    Args:
        object_id: Stored object id.

    Returns:
        Key such as 'objects/3f2c...'.
    """
    return f'objects/{object_id.hex}'
