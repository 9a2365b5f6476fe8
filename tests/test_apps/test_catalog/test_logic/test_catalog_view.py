"""Tests for the catalog page view-model."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest

from server.apps.catalog.logic.catalog_view import (
    CatalogEntry,
    SortOrder,
    build_catalog,
    distinct_labels,
    filter_by_label,
    sort_entries,
)

_BASE_DATE = datetime(2024, 6, 10, tzinfo=UTC)


def _entry(label, days=0, name='report.pdf'):
    return CatalogEntry(
        id=uuid.uuid4(),
        stored_name=f'1718000000000_{name}',
        upload_date=_BASE_DATE + timedelta(days=days),
        label=label,
    )


def test_sort_by_label_is_case_insensitive():
    """Test a-z sort of ["B", "a", "C"] yields ["a", "B", "C"]."""
    entries = [_entry('B'), _entry('a'), _entry('C')]

    sorted_entries = sort_entries(entries, SortOrder.LABEL)

    assert [entry.label for entry in sorted_entries] == ['a', 'B', 'C']


def test_sort_by_label_missing_label_first():
    """Test entries without a label sort as an empty string."""
    entries = [_entry('Invoice'), _entry(None), _entry('Contract')]

    sorted_entries = sort_entries(entries, SortOrder.LABEL)

    assert [entry.label for entry in sorted_entries] == [
        None,
        'Contract',
        'Invoice',
    ]


def test_sort_newest_first():
    """Test newest order sorts by upload date descending."""
    entries = [_entry('a', days=1), _entry('b', days=3), _entry('c', days=2)]

    sorted_entries = sort_entries(entries, SortOrder.NEWEST)

    assert [entry.label for entry in sorted_entries] == ['b', 'c', 'a']


def test_sort_oldest_first():
    """Test oldest order sorts by upload date ascending."""
    entries = [_entry('a', days=1), _entry('b', days=3), _entry('c', days=2)]

    sorted_entries = sort_entries(entries, SortOrder.OLDEST)

    assert [entry.label for entry in sorted_entries] == ['a', 'c', 'b']


def test_filter_by_label_exact_match():
    """Test filtering keeps exact label matches only."""
    entries = [_entry('Invoice'), _entry('invoice'), _entry(None)]

    filtered = filter_by_label(entries, 'Invoice')

    assert [entry.label for entry in filtered] == ['Invoice']


@pytest.mark.parametrize('label', [None, ''])
def test_filter_by_label_pass_through(label):
    """Test no selected label keeps every entry."""
    entries = [_entry('Invoice'), _entry(None)]

    assert filter_by_label(entries, label) == entries


def test_distinct_labels():
    """Test label choices are distinct, non-empty, first-seen order."""
    entries = [
        _entry('Invoice'),
        _entry(None),
        _entry('Contract'),
        _entry('Invoice'),
        _entry(''),
    ]

    assert distinct_labels(entries) == ['Invoice', 'Contract']


@pytest.mark.parametrize(('raw_value', 'expected'), [
    ('newest', SortOrder.NEWEST),
    ('oldest', SortOrder.OLDEST),
    ('a-z', SortOrder.LABEL),
    (None, SortOrder.NEWEST),
    ('sideways', SortOrder.NEWEST),
])
def test_sort_order_parse(raw_value, expected):
    """Test query string values map to sort orders."""
    assert SortOrder.parse(raw_value) is expected


def test_entry_preview_and_display_name():
    """Test PDFs are previewable and names lose their prefix."""
    pdf = _entry('Invoice', name='report.PDF')
    sheet = _entry('Report', name='q3_sales.xlsx')

    assert pdf.is_previewable
    assert not sheet.is_previewable
    assert sheet.display_name == 'q3_sales.xlsx'


def test_build_catalog():
    """Test page combines filter, sort and label choices."""
    entries = [
        _entry('Invoice', days=1),
        _entry('Contract', days=2),
        _entry('Invoice', days=3),
    ]

    page = build_catalog(entries, label='Invoice', order=SortOrder.OLDEST)

    assert [entry.upload_date for entry in page.entries] == [
        _BASE_DATE + timedelta(days=1),
        _BASE_DATE + timedelta(days=3),
    ]
    # Choices come from the full set, not the filtered one
    assert page.labels == ['Invoice', 'Contract']
    assert page.selected_label == 'Invoice'
    assert page.sort_order is SortOrder.OLDEST
