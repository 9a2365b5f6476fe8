"""Custom storage backend for S3-compatible storage."""

import logging
from collections.abc import Iterator
from typing import Any, Final, final, override

from botocore.exceptions import BotoCoreError
from storages.backends.s3 import S3Storage

from server.apps.catalog.exceptions import StoreError

# S3 rejects non-final multipart parts smaller than this
MIN_PART_SIZE: Final = 5 * 1024 * 1024

_DEFAULT_READ_CHUNK_SIZE: Final = 64 * 1024

logger = logging.getLogger(__name__)


@final
class MultipartWriter:
    """Write-only stream that lands in S3 as a multipart upload.

    Bytes are buffered up to one part and then uploaded, so memory use
    is bounded by ``part_size`` no matter how large the object grows.
    Nothing becomes visible in the bucket until ``close()`` completes
    the upload; ``abort()`` discards the uploaded parts.
    """

    def __init__(
        self,
        client: Any,
        bucket_name: str,
        key: str,
        part_size: int,
        upload_id: str,
    ) -> None:
        """Initialize writer for an already created multipart upload.

        Args:
            client: boto3 S3 client.
            bucket_name: Target bucket.
            key: Target object key.
            part_size: Size of every part except the last one.
            upload_id: Id returned by CreateMultipartUpload.
        """
        self._s3_client = client
        self._bucket_name = bucket_name
        self._key = key
        self._part_size = part_size
        self._upload_id = upload_id
        self._parts: list[dict[str, Any]] = []
        self._buffer = bytearray()
        self.bytes_written = 0
        self.closed = False

    @property
    def key(self) -> str:
        """Target object key."""
        return self._key

    def write(self, data: bytes) -> int:
        """Append bytes to the object.

        Args:
            data: Next bytes of the object.

        Returns:
            Number of bytes accepted.

        Raises:
            ValueError: If the writer was already closed or aborted.
        """
        if self.closed:
            raise ValueError('Write to a closed multipart writer')
        self._buffer.extend(data)
        self.bytes_written += len(data)
        while len(self._buffer) >= self._part_size:
            part = bytes(self._buffer[:self._part_size])
            del self._buffer[:self._part_size]
            self._upload_part(part)
        return len(data)

    def close(self) -> None:
        """Upload the remaining bytes and complete the upload."""
        if self.closed:
            return
        # An empty object still needs one (empty) part
        if self._buffer or not self._parts:
            self._upload_part(bytes(self._buffer))
            self._buffer.clear()
        self._s3_client.complete_multipart_upload(
            Bucket=self._bucket_name,
            Key=self._key,
            UploadId=self._upload_id,
            MultipartUpload={'Parts': self._parts},
        )
        self.closed = True
        logger.debug(
            'Completed multipart upload: %s (%d parts, %d bytes)',
            self._key,
            len(self._parts),
            self.bytes_written,
        )

    def abort(self) -> None:
        """Discard the upload.

        This is a best-effort operation, failures are logged only.
        Incomplete uploads are never readable, and a bucket lifecycle
        rule can reclaim parts left behind.
        """
        if self.closed:
            return
        self.closed = True
        self._buffer.clear()
        try:
            logger.warning('Aborting multipart upload: %s', self._key)
            self._s3_client.abort_multipart_upload(
                Bucket=self._bucket_name,
                Key=self._key,
                UploadId=self._upload_id,
            )
        except Exception:
            logger.exception(
                'Failed to abort multipart upload, parts left behind: %s',
                self._key,
            )

    def _upload_part(self, body: bytes) -> None:
        part_number = len(self._parts) + 1
        response = self._s3_client.upload_part(
            Bucket=self._bucket_name,
            Key=self._key,
            UploadId=self._upload_id,
            PartNumber=part_number,
            Body=body,
        )
        self._parts.append({'ETag': response['ETag'], 'PartNumber': part_number})


@final
class ObjectReader:
    """Chunked read stream over an S3 object body.

    Iterating yields the object's bytes in order. The underlying HTTP
    stream is released by ``close()``, which is also called when the
    iteration ends or is abandoned.
    """

    def __init__(
        self,
        body: Any,
        key: str,
        length: int,
        chunk_size: int = _DEFAULT_READ_CHUNK_SIZE,
    ) -> None:
        """Initialize reader.

        Args:
            body: botocore StreamingBody from GetObject.
            key: Object key (for logging).
            length: Object size in bytes.
            chunk_size: Size of yielded chunks.
        """
        self._body = body
        self._key = key
        self._chunk_size = chunk_size
        self.length = length
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        """Yield the object's bytes chunk by chunk.

        Yields:
            Byte chunks of at most ``chunk_size`` bytes.

        Raises:
            StoreError: If the stream breaks mid-read.
        """
        try:
            yield from self._body.iter_chunks(self._chunk_size)
        except BotoCoreError as error:
            logger.exception('Read stream interrupted: %s', self._key)
            raise StoreError(f'Read interrupted: {self._key}') from error
        finally:
            self.close()

    def read(self) -> bytes:
        """Read the whole remaining object.

        Only meant for small objects and tests.

        Returns:
            Remaining bytes.
        """
        return b''.join(self)

    def close(self) -> None:
        """Release the underlying HTTP stream."""
        if self.closed:
            return
        self.closed = True
        self._body.close()
        logger.debug('Closed read stream: %s', self._key)


@final
class DocumentStorage(S3Storage):
    """Custom S3 storage backend for catalog documents.

    Extends django-storages S3Storage with:
    - Streaming multipart writes with a bounded buffer
    - Chunked streaming reads that never load an object in full
    - Best-effort rollback of uploads whose metadata was not saved
    - Enhanced error logging
    """

    def open_write(
        self,
        name: str,
        part_size: int = MIN_PART_SIZE,
        content_type: str | None = None,
    ) -> MultipartWriter:
        """Start a multipart upload and return a writer for it.

        Args:
            name: Object key.
            part_size: Multipart part size in bytes.
            content_type: Optional Content-Type stored with the object.

        Returns:
            Writer that must be closed or aborted by the caller.

        Raises:
            Exception: If the upload cannot be created.
        """
        extra_args: dict[str, Any] = {}
        if content_type:
            extra_args['ContentType'] = content_type
        try:
            logger.info('Opening upload stream: %s', name)
            response = self._s3_client.create_multipart_upload(
                Bucket=self.bucket_name,
                Key=name,
                **extra_args,
            )
        except Exception:
            logger.exception('Failed to open upload stream: %s', name)
            raise
        return MultipartWriter(
            client=self._s3_client,
            bucket_name=self.bucket_name,
            key=name,
            part_size=part_size,
            upload_id=response['UploadId'],
        )

    def open_read(
        self,
        name: str,
        chunk_size: int = _DEFAULT_READ_CHUNK_SIZE,
    ) -> ObjectReader:
        """Open a streaming read of an object.

        Args:
            name: Object key.
            chunk_size: Size of yielded chunks.

        Returns:
            Reader that must be closed by the caller.

        Raises:
            ClientError: If the object is missing or access fails.
        """
        logger.debug('Opening read stream: %s', name)
        response = self._s3_client.get_object(Bucket=self.bucket_name, Key=name)
        return ObjectReader(
            body=response['Body'],
            key=name,
            length=response['ContentLength'],
            chunk_size=chunk_size,
        )

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Args:
            name: Storage path of file to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise

    def rollback_upload(self, name: str) -> None:
        """Delete uploaded file for DB transaction rollback.

        This method is called when a database transaction fails after
        a file has been successfully uploaded to S3. It attempts to
        delete the file to maintain consistency.

        This is a best-effort operation - if deletion fails, the error
        is logged but not raised, as the DB rollback has already occurred.

        Args:
            name: Storage path of file to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting file: %s', name)
            self.delete(name)
            logger.info('Successfully rolled back file upload: %s', name)
        except Exception:
            # The object stays in the bucket without a metadata row,
            # no identifier resolves to it
            logger.exception(
                'Failed to rollback upload, orphaned file: %s',
                name,
            )

    @property
    def _s3_client(self) -> Any:
        """Low-level boto3 client sharing the storage's connection."""
        return self.connection.meta.client
