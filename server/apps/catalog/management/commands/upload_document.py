"""Management command to upload a document from local disk."""

import logging
from pathlib import Path
from typing import Any, override

from django.apps import apps
from django.core.exceptions import ValidationError
from django.core.files.base import File as DjangoFile
from django.core.management.base import BaseCommand, CommandError

from server.apps.catalog.exceptions import StoreError
from server.apps.catalog.logic.upload_operations import upload_document

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Run the upload pipeline for a file on disk."""

    help = 'Upload a document into the catalog with a document type label'

    @override
    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            'path',
            type=Path,
            help='Path of the file to upload',
        )
        parser.add_argument(
            '--label',
            required=True,
            help='Document type shown in the catalog',
        )

    @override
    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the upload command.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If the file is missing or the upload fails.
        """
        path: Path = options['path']
        if not path.is_file():
            raise CommandError(f'No such file: {path}')

        store = apps.get_app_config('catalog').object_store  # type: ignore[attr-defined]
        with path.open('rb') as file_handle:
            try:
                stored_object = upload_document(
                    store,
                    DjangoFile(file_handle, name=path.name),
                    options['label'],
                )
            except ValidationError as exc:
                raise CommandError(' '.join(exc.messages)) from exc
            except StoreError as exc:
                logger.exception('Upload failed: %s', path)
                raise CommandError(f'Upload failed: {exc}') from exc

        self.stdout.write(
            self.style.SUCCESS(
                f'Uploaded {stored_object.stored_name} '
                f'(ID: {stored_object.id})',
            ),
        )
