"""View-model for the catalog page.

Pure functions over the enumeration projection: filtering by label,
sorting, and deriving the label choices. Nothing here touches the
store, so the same logic serves the page view and any API client.
"""

import enum
import locale
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import final

from server.apps.catalog.infrastructure import metadata
from server.apps.catalog.models import StoredObject


@final
class SortOrder(enum.StrEnum):
    """Catalog sort orders, valued as they appear in query strings."""

    NEWEST = 'newest'
    OLDEST = 'oldest'
    LABEL = 'a-z'

    @classmethod
    def parse(cls, raw_value: str | None) -> 'SortOrder':
        """Parse a query string value, falling back to NEWEST.

        Args:
            raw_value: Value of the 'sort' parameter.

        Returns:
            Matching sort order.
        """
        try:
            return cls(raw_value)
        except ValueError:
            return cls.NEWEST


@final
@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """One document as shown in the catalog."""

    id: uuid.UUID  # noqa: WPS125
    stored_name: str
    upload_date: datetime
    label: str | None = None

    @classmethod
    def from_stored_object(cls, stored_object: StoredObject) -> 'CatalogEntry':
        """Build an entry from a metadata row."""
        return cls(
            id=stored_object.id,
            stored_name=stored_object.stored_name,
            upload_date=stored_object.upload_date,
            label=stored_object.label,
        )

    @property
    def display_name(self) -> str:
        """Filename without the timestamp prefix."""
        return metadata.display_name(self.stored_name)

    @property
    def is_previewable(self) -> bool:
        """Whether the entry gets an inline preview or a placeholder."""
        return metadata.get_file_extension(self.stored_name) == 'pdf'


@final
@dataclass(frozen=True, slots=True)
class CatalogPage:
    """Everything the catalog page renders."""

    entries: Sequence[CatalogEntry]
    labels: Sequence[str]
    selected_label: str
    sort_order: SortOrder


def filter_by_label(
    entries: Iterable[CatalogEntry],
    label: str | None,
) -> list[CatalogEntry]:
    """Keep entries whose label equals ``label`` exactly.

    Args:
        entries: Entries to filter.
        label: Selected label; empty or None keeps everything.

    Returns:
        Matching entries in their original order.
    """
    if not label:
        return list(entries)
    return [entry for entry in entries if entry.label == label]


def sort_entries(
    entries: Iterable[CatalogEntry],
    order: SortOrder,
) -> list[CatalogEntry]:
    """Sort entries for display.

    Label sorting compares case-folded labels with the current locale's
    collation; entries without a label sort as an empty string.

    Args:
        entries: Entries to sort.
        order: Requested order.

    Returns:
        New sorted list.
    """
    if order is SortOrder.LABEL:
        return sorted(entries, key=_label_sort_key)
    return sorted(
        entries,
        key=lambda entry: entry.upload_date,
        reverse=order is SortOrder.NEWEST,
    )


def distinct_labels(entries: Iterable[CatalogEntry]) -> list[str]:
    """Collect the label choices for the filter control.

    Args:
        entries: Full, unfiltered entry set.

    Returns:
        Distinct non-empty labels in first-seen order.
    """
    seen: dict[str, None] = {}
    for entry in entries:
        if entry.label:
            seen.setdefault(entry.label)
    return list(seen)


def build_catalog(
    entries: Iterable[CatalogEntry],
    label: str | None = None,
    order: SortOrder = SortOrder.NEWEST,
) -> CatalogPage:
    """Build the catalog page view-model.

    Args:
        entries: Every stored document.
        label: Selected label filter, empty for all.
        order: Selected sort order.

    Returns:
        Page with the visible entries and the label choices.
    """
    all_entries = list(entries)
    visible = sort_entries(filter_by_label(all_entries, label), order)
    return CatalogPage(
        entries=visible,
        labels=distinct_labels(all_entries),
        selected_label=label or '',
        sort_order=order,
    )


def _label_sort_key(entry: CatalogEntry) -> str:
    return locale.strxfrm((entry.label or '').casefold())
