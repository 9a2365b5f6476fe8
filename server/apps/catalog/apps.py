"""Django app configuration for catalog app."""

from typing import TYPE_CHECKING, override

from django.apps import AppConfig

if TYPE_CHECKING:
    from server.apps.catalog.logic.object_store import ObjectStore


class CatalogConfig(AppConfig):
    """Configuration for catalog app.

    Owns the process-wide object store handle. It is built once when the
    app registry is ready and handed to the logic layer by the views.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.catalog'
    verbose_name = 'Document catalog'

    object_store: 'ObjectStore'

    @override
    def ready(self) -> None:
        """Create the object store handle."""
        from server.apps.catalog.logic.object_store import (  # noqa: WPS433
            build_object_store,
        )

        self.object_store = build_object_store()
