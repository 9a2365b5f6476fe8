"""Tests for catalog queries."""

import uuid

import pytest
from django.core.exceptions import ValidationError

from server.apps.catalog.exceptions import ObjectNotFoundError
from server.apps.catalog.logic.query_operations import (
    describe,
    get_document,
    list_documents,
    summarize,
)
from server.apps.catalog.models import StoredObject


@pytest.fixture
def labelled_object(db):
    """Stored object with a label.

    Returns:
        StoredObject instance.
    """
    return StoredObject.objects.create(
        stored_name='1718000000000_report.pdf',
        label='Invoice',
        length=10,
    )


def test_get_document(object_store, labelled_object):
    """Test single-object lookup by string id."""
    assert get_document(object_store, str(labelled_object.id)) == labelled_object


@pytest.mark.django_db
def test_get_document_unknown(object_store):
    """Test unknown ids raise ObjectNotFoundError."""
    with pytest.raises(ObjectNotFoundError):
        get_document(object_store, str(uuid.uuid4()))


def test_get_document_malformed(object_store):
    """Test malformed ids raise ValidationError."""
    with pytest.raises(ValidationError):
        get_document(object_store, 'not-an-id')


def test_list_documents(object_store, labelled_object):
    """Test enumeration returns every object."""
    unlabelled = StoredObject.objects.create(
        stored_name='1718000000001_notes.docx',
    )

    documents = list_documents(object_store)

    assert {document.id for document in documents} == {
        labelled_object.id,
        unlabelled.id,
    }


@pytest.mark.django_db
def test_list_documents_empty(object_store):
    """Test enumeration of an empty catalog."""
    assert list_documents(object_store) == []


def test_summarize(labelled_object):
    """Test single-object projection."""
    assert summarize(labelled_object) == {
        '_id': str(labelled_object.id),
        'filename': '1718000000000_report.pdf',
    }


def test_describe(labelled_object):
    """Test enumeration projection carries label and date."""
    projection = describe(labelled_object)

    assert projection['_id'] == str(labelled_object.id)
    assert projection['filename'] == '1718000000000_report.pdf'
    assert projection['metadata'] == {'customFilename': 'Invoice'}
    assert projection['uploadDate'] == labelled_object.upload_date.isoformat()


@pytest.mark.django_db
def test_describe_without_label():
    """Test objects without a label have empty metadata."""
    stored_object = StoredObject.objects.create(
        stored_name='1718000000000_report.pdf',
    )

    assert describe(stored_object)['metadata'] == {}
