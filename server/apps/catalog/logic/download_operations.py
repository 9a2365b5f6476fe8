"""Business logic for document downloads and previews."""

import logging
from dataclasses import dataclass
from typing import Final, final

from django.core.exceptions import ValidationError

from server.apps.catalog.infrastructure.metadata import (
    content_disposition,
    detect_content_type,
    is_inline,
    parse_object_id,
)
from server.apps.catalog.infrastructure.storage import ObjectReader
from server.apps.catalog.logic.object_store import ObjectStore

_PDF_CONTENT_TYPE: Final = 'application/pdf'

logger = logging.getLogger(__name__)


@final
@dataclass(frozen=True, slots=True)
class Download:
    """Everything needed to stream a document to a client."""

    reader: ObjectReader
    content_type: str
    content_disposition: str
    length: int


def open_download(store: ObjectStore, raw_id: str | None) -> Download:
    """Resolve a document for download.

    PDFs are served inline, every other recognized type as an
    attachment. The read stream is opened before returning, so a
    missing object is reported before any byte is sent.

    Args:
        store: Object store.
        raw_id: Identifier from the request.

    Returns:
        Download with an open reader; the caller must close it.

    Raises:
        ValidationError: If the id is malformed or the file type
            is not recognized.
        ObjectNotFoundError: If no such document exists.
        StoreError: If the bucket fails.
    """
    object_id = parse_object_id(raw_id)
    stored_object = store.get(object_id)

    extension = stored_object.get_extension()
    content_type = detect_content_type(extension)
    if content_type is None:
        logger.warning(
            'Refusing download of unrecognized type: %s',
            stored_object.stored_name,
        )
        raise ValidationError('Invalid file type.', code='invalid_type')

    reader = store.read_object(stored_object)
    logger.info('Streaming download: %s', stored_object.stored_name)
    return Download(
        reader=reader,
        content_type=content_type,
        content_disposition=content_disposition(
            stored_object.stored_name,
            inline=is_inline(extension),
        ),
        length=reader.length,
    )


def open_preview(store: ObjectStore, raw_id: str | None) -> Download:
    """Resolve a document for inline PDF preview.

    The document is always served as an inline PDF, whatever its
    actual type. Callers only request previews for PDFs.

    Args:
        store: Object store.
        raw_id: Identifier from the request.

    Returns:
        Download with an open reader; the caller must close it.

    Raises:
        ValidationError: If the id is malformed.
        ObjectNotFoundError: If no such document exists.
        StoreError: If the bucket fails.
    """
    object_id = parse_object_id(raw_id)
    reader = store.open_read(object_id)
    logger.debug('Streaming preview: %s', object_id)
    return Download(
        reader=reader,
        content_type=_PDF_CONTENT_TYPE,
        content_disposition=content_disposition(
            f'{object_id}.pdf',
            inline=True,
        ),
        length=reader.length,
    )
