"""Shared fixtures for catalog app tests."""

from typing import Final

import boto3
import pytest
from django.apps import apps
from django.core.files.uploadedfile import SimpleUploadedFile
from moto import mock_aws

from server.apps.catalog.infrastructure.storage import (
    MIN_PART_SIZE,
    DocumentStorage,
)
from server.apps.catalog.logic.object_store import ObjectStore

_BUCKET_NAME: Final = 'document-catalog'
_REGION: Final = 'us-east-1'

_PDF_BYTES: Final = b'%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n'


@pytest.fixture
def mock_s3():
    """Mock S3 service with document-catalog bucket.

    Yields:
        boto3 S3 resource with document-catalog bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name=_REGION)

        # Create bucket
        conn.create_bucket(Bucket=_BUCKET_NAME)

        yield conn


@pytest.fixture
def document_storage(mock_s3):
    """Storage backend pointed at the mocked bucket.

    Returns:
        DocumentStorage instance.
    """
    return DocumentStorage(bucket_name=_BUCKET_NAME, region_name=_REGION)


@pytest.fixture
def object_store(document_storage):
    """Object store over the mocked bucket.

    Returns:
        ObjectStore with the smallest allowed part size.
    """
    return ObjectStore(
        document_storage,
        part_size=MIN_PART_SIZE,
        read_chunk_size=1024,
    )


@pytest.fixture
def installed_store(object_store, monkeypatch):
    """Make views and commands use the mocked object store.

    Returns:
        The installed ObjectStore.
    """
    monkeypatch.setattr(
        apps.get_app_config('catalog'),
        'object_store',
        object_store,
    )
    return object_store


@pytest.fixture
def broken_store(mock_s3, monkeypatch):
    """Install an object store whose bucket does not exist.

    Returns:
        ObjectStore failing on every bucket call.
    """
    store = ObjectStore(
        DocumentStorage(bucket_name='missing-bucket', region_name=_REGION),
        part_size=MIN_PART_SIZE,
        read_chunk_size=1024,
    )
    monkeypatch.setattr(apps.get_app_config('catalog'), 'object_store', store)
    return store


@pytest.fixture
def make_upload():
    """Factory for uploaded files.

    Returns:
        Callable building a SimpleUploadedFile.
    """
    def factory(name: str = 'report.pdf', content: bytes = _PDF_BYTES):
        return SimpleUploadedFile(name, content)
    return factory


@pytest.fixture
def bucket_keys(mock_s3):
    """Lister for keys in the mocked bucket.

    Returns:
        Callable returning the keys of all stored objects.
    """
    def lister() -> list[str]:
        return [obj.key for obj in mock_s3.Bucket(_BUCKET_NAME).objects.all()]
    return lister
