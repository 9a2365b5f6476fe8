"""Object store adapter.

A stored object is a chunked bucket object plus one ``StoredObject``
metadata row. The row is written only after the bucket upload has
completed, so an id never resolves to a partially written object.
"""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import final

from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from django.core.files.storage import storages
from django.db import DatabaseError, transaction

from server.apps.catalog.exceptions import ObjectNotFoundError, StoreError
from server.apps.catalog.infrastructure.storage import (
    DocumentStorage,
    MultipartWriter,
    ObjectReader,
)
from server.apps.catalog.models import StoredObject, object_key

# Error codes S3-compatible stores use for a missing key
_MISSING_KEY_CODES = frozenset(('NoSuchKey', '404', 'NotFound'))

_STORAGE_ERRORS = (BotoCoreError, ClientError)

logger = logging.getLogger(__name__)


@final
@dataclass(frozen=True, slots=True)
class ObjectMetadata:
    """Metadata attached to a stored object at creation."""

    label: str | None = None


@final
class ObjectWriter:
    """Sink returned by ``ObjectStore.open_write``.

    ``object_id`` is allocated up front; ``stored_object`` is set once
    the write block has completed and the metadata row exists.
    """

    def __init__(
        self,
        object_id: uuid.UUID,
        stored_name: str,
        stream: MultipartWriter,
    ) -> None:
        self.object_id = object_id
        self.stored_name = stored_name
        self.stored_object: StoredObject | None = None
        self._stream = stream

    @property
    def bytes_written(self) -> int:
        """Bytes accepted so far."""
        return self._stream.bytes_written

    def write(self, data: bytes) -> int:
        """Append bytes to the object.

        Args:
            data: Next bytes of the object.

        Returns:
            Number of bytes accepted.

        Raises:
            StoreError: If a part upload fails.
        """
        try:
            return self._stream.write(data)
        except _STORAGE_ERRORS as error:
            raise StoreError(
                f'Write failed for {self.stored_name}',
            ) from error

    def _complete(self) -> None:
        try:
            self._stream.close()
        except _STORAGE_ERRORS as error:
            raise StoreError(
                f'Could not complete upload of {self.stored_name}',
            ) from error

    def _abort(self) -> None:
        self._stream.abort()


@final
class ObjectStore:
    """Adapter over the document bucket and its metadata table.

    One instance is created at startup (see ``CatalogConfig.ready``)
    and passed explicitly to every operation that needs it.
    """

    def __init__(
        self,
        storage: DocumentStorage,
        part_size: int,
        read_chunk_size: int,
    ) -> None:
        """Initialize store.

        Args:
            storage: Bucket backend.
            part_size: Multipart part size for writes.
            read_chunk_size: Chunk size for streamed reads.
        """
        self._storage = storage
        self._part_size = part_size
        self._read_chunk_size = read_chunk_size

    @contextmanager
    def open_write(
        self,
        stored_name: str,
        metadata: ObjectMetadata,
    ) -> Iterator[ObjectWriter]:
        """Open a write stream for a new object.

        Leaving the block normally completes the upload and creates the
        metadata row. An exception inside the block aborts the upload
        and nothing becomes addressable.

        Args:
            stored_name: Unique storage name.
            metadata: Metadata to attach.

        Yields:
            Writer with the freshly allocated ``object_id``.

        Raises:
            StoreError: If the bucket or database fails.
        """
        object_id = uuid.uuid4()
        key = object_key(object_id)
        try:
            stream = self._storage.open_write(key, part_size=self._part_size)
        except _STORAGE_ERRORS as error:
            raise StoreError(
                f'Could not open upload for {stored_name}',
            ) from error

        writer = ObjectWriter(object_id, stored_name, stream)
        try:
            yield writer
            writer._complete()  # noqa: SLF001
        except Exception:
            logger.exception('Upload failed, aborting: %s', stored_name)
            writer._abort()  # noqa: SLF001
            raise

        writer.stored_object = self._create_record(writer, metadata, key)

    def open_read(self, object_id: uuid.UUID) -> ObjectReader:
        """Open a streamed read of an object.

        Args:
            object_id: Stored object id.

        Returns:
            Reader yielding the object's bytes; the caller must close it.

        Raises:
            ObjectNotFoundError: If the id does not resolve to an object.
            StoreError: If the bucket fails.
        """
        return self.read_object(self.get(object_id))

    def read_object(self, stored_object: StoredObject) -> ObjectReader:
        """Open a streamed read for an already loaded metadata row.

        Args:
            stored_object: Row returned by ``get``.

        Returns:
            Reader yielding the object's bytes; the caller must close it.

        Raises:
            ObjectNotFoundError: If the bucket has no bytes for the row.
            StoreError: If the bucket fails.
        """
        object_id = stored_object.id
        try:
            return self._storage.open_read(
                stored_object.storage_key,
                chunk_size=self._read_chunk_size,
            )
        except ClientError as error:
            if _is_missing_key(error):
                logger.warning(
                    'Metadata row without bucket object: %s',
                    stored_object.storage_key,
                )
                raise ObjectNotFoundError(object_id) from error
            raise StoreError(f'Could not read object {object_id}') from error
        except BotoCoreError as error:
            raise StoreError(f'Could not read object {object_id}') from error

    def list_objects(self) -> list[StoredObject]:
        """Enumerate all stored objects.

        Every call queries the database again. Callers must not rely
        on the ordering.

        Returns:
            All stored objects.

        Raises:
            StoreError: If the database fails.
        """
        try:
            return list(StoredObject.objects.all())
        except DatabaseError as error:
            raise StoreError('Could not list stored objects') from error

    def get(self, object_id: uuid.UUID) -> StoredObject:
        """Fetch one object's metadata.

        Args:
            object_id: Stored object id.

        Returns:
            StoredObject instance.

        Raises:
            ObjectNotFoundError: If no such object exists.
            StoreError: If the database fails.
        """
        try:
            return StoredObject.objects.get(pk=object_id)
        except StoredObject.DoesNotExist:
            raise ObjectNotFoundError(object_id) from None
        except DatabaseError as error:
            raise StoreError(f'Could not load object {object_id}') from error

    def _create_record(
        self,
        writer: ObjectWriter,
        metadata: ObjectMetadata,
        key: str,
    ) -> StoredObject:
        try:
            with transaction.atomic():
                stored_object = StoredObject.objects.create(
                    id=writer.object_id,
                    stored_name=writer.stored_name,
                    label=metadata.label,
                    length=writer.bytes_written,
                )
        except DatabaseError as error:
            # Rollback: delete the completed upload since the row is missing
            logger.exception(
                'Database transaction failed, rolling back storage upload: %s',
                key,
            )
            self._storage.rollback_upload(key)
            raise StoreError(
                f'Could not save metadata for {writer.stored_name}',
            ) from error

        logger.info(
            'Stored object created: %s (ID: %s, %d bytes)',
            stored_object.stored_name,
            stored_object.id,
            stored_object.length,
        )
        return stored_object


def build_object_store(storage: DocumentStorage | None = None) -> ObjectStore:
    """Create the object store from settings.

    Args:
        storage: Bucket backend, defaults to the 'default' storage.

    Returns:
        Configured ObjectStore.
    """
    return ObjectStore(
        storage=storage or storages['default'],  # type: ignore[arg-type]
        part_size=settings.CATALOG_CHUNK_SIZE,
        read_chunk_size=settings.CATALOG_READ_CHUNK_SIZE,
    )


def _is_missing_key(error: ClientError) -> bool:
    code = error.response.get('Error', {}).get('Code', '')
    return code in _MISSING_KEY_CODES
