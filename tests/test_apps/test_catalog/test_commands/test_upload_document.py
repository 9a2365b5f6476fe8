"""Tests for upload_document management command."""

from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from server.apps.catalog.models import StoredObject


@pytest.mark.django_db
class TestUploadDocumentCommand:
    """Tests for upload_document management command."""

    def test_upload_from_disk(self, tmp_path, installed_store):
        """Test a local file is stored with its label."""
        path = tmp_path / 'contract.docx'
        path.write_bytes(b'docx bytes')

        out = StringIO()
        call_command('upload_document', str(path), '--label', 'Contract', stdout=out)

        stored_object = StoredObject.objects.get()
        assert stored_object.label == 'Contract'
        assert stored_object.stored_name.endswith('_contract.docx')
        assert installed_store.open_read(stored_object.id).read() == b'docx bytes'
        assert 'Uploaded' in out.getvalue()

    def test_missing_file(self, tmp_path, installed_store):
        """Test a missing path fails without storing anything."""
        with pytest.raises(CommandError, match='No such file'):
            call_command('upload_document', str(tmp_path / 'nope.pdf'), '--label', 'X')

        assert StoredObject.objects.count() == 0

    def test_blank_label(self, tmp_path, installed_store):
        """Test a blank label is rejected."""
        path = tmp_path / 'report.pdf'
        path.write_bytes(b'%PDF')

        with pytest.raises(CommandError, match='required'):
            call_command('upload_document', str(path), '--label', ' ')

        assert StoredObject.objects.count() == 0
