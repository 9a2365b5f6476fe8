"""Business logic for document uploads."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Final

from django.core.exceptions import ValidationError
from django.core.files.base import File as DjangoFile
from django.utils import timezone

from server.apps.catalog.infrastructure.metadata import build_stored_name
from server.apps.catalog.logic.object_store import ObjectMetadata, ObjectStore
from server.apps.catalog.models import LABEL_MAX_LENGTH, StoredObject

# Used when the client sends no filename at all
_DEFAULT_FILENAME: Final = 'file.pdf'

_EPOCH: Final = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS: Final = timedelta(milliseconds=1)

logger = logging.getLogger(__name__)


def upload_document(
    store: ObjectStore,
    uploaded_file: DjangoFile | None,
    label: str | None,
    *,
    now: datetime | None = None,
) -> StoredObject:
    """Stream an uploaded document into the object store.

    The file is copied chunk by chunk, so memory use does not depend
    on its size. Nothing is retried: on failure the caller resubmits.

    Args:
        store: Object store to write to.
        uploaded_file: Uploaded file, None if the request had none.
        label: User-supplied document type.
        now: Upload time, defaults to the current time.

    Returns:
        Created StoredObject.

    Raises:
        ValidationError: If the file or label is missing, before any
            store interaction.
        StoreError: If the store fails; no object is created.
    """
    label = _validate_upload(uploaded_file, label)
    original_filename = uploaded_file.name or _DEFAULT_FILENAME  # type: ignore[union-attr]
    stored_name = build_stored_name(
        original_filename,
        _timestamp_ms(now or timezone.now()),
    )

    logger.info('Uploading document: %s (label: %s)', stored_name, label)
    with store.open_write(stored_name, ObjectMetadata(label=label)) as writer:
        for chunk in uploaded_file.chunks():  # type: ignore[union-attr]
            writer.write(chunk)

    return writer.stored_object  # type: ignore[return-value]


def _validate_upload(
    uploaded_file: DjangoFile | None,
    label: str | None,
) -> str:
    """Check that both the file and the label were sent.

    Args:
        uploaded_file: Uploaded file or None.
        label: Label or None.

    Returns:
        The label.

    Raises:
        ValidationError: If either is missing or the label is too long.
    """
    if uploaded_file is None or not label or not label.strip():
        raise ValidationError(
            'Both a file and a document type are required.',
            code='missing_field',
        )
    if len(label) > LABEL_MAX_LENGTH:
        raise ValidationError(
            f'Document type must be at most {LABEL_MAX_LENGTH} characters.',
            code='label_too_long',
        )
    return label


def _timestamp_ms(moment: datetime) -> int:
    # Integer arithmetic, float timestamps can lose the last millisecond
    return (moment - _EPOCH) // _ONE_MS
