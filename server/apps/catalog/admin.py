"""Django admin configuration for catalog app."""

from django.contrib import admin
from django.http import HttpRequest
from django.urls import reverse
from django.utils.html import format_html

from server.apps.catalog.models import StoredObject


def _format_bytes(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 KB').
    """
    if size_bytes < 1024:
        return f'{size_bytes} B'
    if size_bytes < 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / 1024:.1f} KB'
    if size_bytes < 1024 * 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / (1024 * 1024):.1f} MB'
    return f'{size_bytes / (1024 * 1024 * 1024):.1f} GB'


@admin.register(StoredObject)
class StoredObjectAdmin(admin.ModelAdmin[StoredObject]):
    """Read-only admin interface for stored documents.

    Documents are created through the upload endpoint only and are
    never changed or deleted.
    """

    list_display = [
        'label',
        'filename_display',
        'size_display',
        'upload_date',
        'open_link',
    ]

    list_filter = [
        'label',
        'upload_date',
    ]

    search_fields = [
        'stored_name',
        'label',
    ]

    readonly_fields = [
        'id',
        'stored_name',
        'label',
        'length',
        'upload_date',
    ]

    fieldsets = (
        ('Document', {
            'fields': ('id', 'stored_name', 'label'),
        }),
        ('Metadata', {
            'fields': ('length', 'upload_date'),
        }),
    )

    def filename_display(self, obj: StoredObject) -> str:
        """Display original filename without timestamp prefix.

        Args:
            obj: StoredObject instance.

        Returns:
            Filename as uploaded.
        """
        return obj.get_display_name()
    filename_display.short_description = 'Filename'  # type: ignore[attr-defined]

    def size_display(self, obj: StoredObject) -> str:
        """Display object size in human-readable format.

        Args:
            obj: StoredObject instance.

        Returns:
            Formatted size string.
        """
        return _format_bytes(obj.length)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    def open_link(self, obj: StoredObject) -> str:
        """Link to the download endpoint.

        Args:
            obj: StoredObject instance.

        Returns:
            HTML anchor.
        """
        return format_html(
            '<a href="{url}?id={object_id}" target="_blank" '
            'rel="noopener noreferrer">Open</a>',
            url=reverse('catalog:download'),
            object_id=obj.id,
        )
    open_link.short_description = 'Open'  # type: ignore[attr-defined]

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Uploads go through the upload endpoint."""
        return False

    def has_change_permission(
        self,
        request: HttpRequest,
        obj: StoredObject | None = None,
    ) -> bool:
        """Stored documents are immutable."""
        return False

    def has_delete_permission(
        self,
        request: HttpRequest,
        obj: StoredObject | None = None,
    ) -> bool:
        """There is no deletion path for stored documents."""
        return False
