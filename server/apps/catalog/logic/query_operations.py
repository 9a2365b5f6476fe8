"""Business logic for catalog queries.

Queries return every object at once: there is no pagination and no
server-side filtering, the catalog is expected to stay small.
"""

import logging
from typing import Any

from server.apps.catalog.infrastructure.metadata import parse_object_id
from server.apps.catalog.logic.object_store import ObjectStore
from server.apps.catalog.models import StoredObject

logger = logging.getLogger(__name__)


def get_document(store: ObjectStore, raw_id: str | None) -> StoredObject:
    """Look up one document by its client-supplied id.

    Args:
        store: Object store.
        raw_id: Identifier from the request.

    Returns:
        StoredObject instance.

    Raises:
        ValidationError: If the id is malformed.
        ObjectNotFoundError: If no such document exists.
    """
    return store.get(parse_object_id(raw_id))


def list_documents(store: ObjectStore) -> list[StoredObject]:
    """Enumerate every document, in no particular order.

    Args:
        store: Object store.

    Returns:
        All stored objects.

    Raises:
        StoreError: If the database fails.
    """
    documents = store.list_objects()
    logger.debug('Listed %d documents', len(documents))
    return documents


def summarize(stored_object: StoredObject) -> dict[str, Any]:
    """Single-object projection.

    Args:
        stored_object: Document to project.

    Returns:
        Mapping with '_id' and 'filename'.
    """
    return {
        '_id': str(stored_object.id),
        'filename': stored_object.stored_name,
    }


def describe(stored_object: StoredObject) -> dict[str, Any]:
    """Enumeration projection.

    Args:
        stored_object: Document to project.

    Returns:
        Mapping with '_id', 'filename', 'metadata' and 'uploadDate'.
        'metadata' is empty for documents without a label.
    """
    metadata: dict[str, str] = {}
    if stored_object.label is not None:
        metadata['customFilename'] = stored_object.label
    return {
        **summarize(stored_object),
        'metadata': metadata,
        'uploadDate': stored_object.upload_date.isoformat(),
    }
