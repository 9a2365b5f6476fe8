"""Tests for metadata helpers."""

import uuid

import pytest
from django.core.exceptions import ValidationError

from server.apps.catalog.infrastructure.metadata import (
    build_stored_name,
    content_disposition,
    detect_content_type,
    display_name,
    get_file_extension,
    is_inline,
    parse_object_id,
    sanitize_filename,
)


def test_build_stored_name():
    """Test timestamp prefix is joined with an underscore."""
    assert build_stored_name('report.pdf', 1718000000000) == (
        '1718000000000_report.pdf'
    )


def test_display_name():
    """Test timestamp prefix is stripped up to the first underscore."""
    assert display_name('1718000000000_report.pdf') == 'report.pdf'
    assert display_name('1718000000000_q3_sales.xlsx') == 'q3_sales.xlsx'
    assert display_name('report.pdf') == 'report.pdf'


def test_get_file_extension():
    """Test file extension extraction."""
    assert get_file_extension('test.pdf') == 'pdf'
    assert get_file_extension('test.XLSX') == 'xlsx'  # Lowercase
    assert get_file_extension('test') == ''  # No extension
    assert get_file_extension('test.tar.gz') == 'gz'  # Last extension


def test_detect_content_type_office_documents():
    """Test the catalog's main document types are mapped."""
    assert detect_content_type('pdf') == 'application/pdf'
    assert detect_content_type('docx') == (
        'application/vnd.openxmlformats-officedocument'
        '.wordprocessingml.document'
    )
    assert detect_content_type('xlsx') == (
        'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
    assert detect_content_type('txt') == 'text/plain'


def test_detect_content_type_unknown():
    """Test unknown extensions have no fallback type."""
    assert detect_content_type('unknownext') is None
    assert detect_content_type('') is None


def test_is_inline():
    """Test only PDFs are rendered inline."""
    assert is_inline('pdf')
    assert not is_inline('docx')
    assert not is_inline('xlsx')
    assert not is_inline('png')


def test_sanitize_filename():
    """Test characters outside [A-Za-z0-9._-] are replaced."""
    assert sanitize_filename('1718_report-v2.pdf') == '1718_report-v2.pdf'
    assert sanitize_filename('Yıllık rapor.pdf') == 'Y_ll_k_rapor.pdf'
    assert sanitize_filename('a"b\r\n.pdf') == 'a_b__.pdf'


def test_content_disposition():
    """Test disposition header values."""
    assert content_disposition('report.pdf', inline=True) == (
        'inline; filename="report.pdf"'
    )
    assert content_disposition('my sheet.xlsx', inline=False) == (
        'attachment; filename="my_sheet.xlsx"'
    )


def test_parse_object_id():
    """Test valid identifiers are parsed."""
    object_id = uuid.uuid4()

    assert parse_object_id(str(object_id)) == object_id
    assert parse_object_id(object_id.hex) == object_id


@pytest.mark.parametrize('raw_id', [None, '', 'not-an-id', '12345'])
def test_parse_object_id_invalid(raw_id):
    """Test missing and malformed identifiers are rejected."""
    with pytest.raises(ValidationError, match='Invalid file id'):
        parse_object_id(raw_id)
