"""Metadata helpers for stored documents."""

import mimetypes
import re
import uuid
from collections.abc import Mapping
from typing import Final

from django.core.exceptions import ValidationError

# Checked before the mimetypes registry, whose contents vary by platform
_CONTENT_TYPES: Final[Mapping[str, str]] = {
    'pdf': 'application/pdf',
    'docx': (
        'application/vnd.openxmlformats-officedocument'
        '.wordprocessingml.document'
    ),
    'xlsx': (
        'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    ),
    'pptx': (
        'application/vnd.openxmlformats-officedocument'
        '.presentationml.presentation'
    ),
    'doc': 'application/msword',
    'xls': 'application/vnd.ms-excel',
    'ppt': 'application/vnd.ms-powerpoint',
    'odt': 'application/vnd.oasis.opendocument.text',
    'ods': 'application/vnd.oasis.opendocument.spreadsheet',
    'rtf': 'application/rtf',
    'txt': 'text/plain',
    'csv': 'text/csv',
    'png': 'image/png',
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'gif': 'image/gif',
}

# Only these render in the browser, everything else is downloaded
_INLINE_EXTENSIONS: Final = frozenset(('pdf',))

_UNSAFE_FILENAME_CHARS: Final = re.compile(r'[^A-Za-z0-9._-]')

_TIMESTAMP_SEPARATOR: Final = '_'


def build_stored_name(original_filename: str, timestamp_ms: int) -> str:
    """Build the unique storage name for an upload.

    Args:
        original_filename: Name of the uploaded file.
        timestamp_ms: Upload time in milliseconds since the epoch.

    Returns:
        Storage name (e.g., '1718000000000_report.pdf').
    """
    return f'{timestamp_ms}{_TIMESTAMP_SEPARATOR}{original_filename}'


def display_name(stored_name: str) -> str:
    """Strip the timestamp prefix from a storage name.

    Args:
        stored_name: Storage name (e.g., '1718000000000_report.pdf').

    Returns:
        Original filename (e.g., 'report.pdf'). Names without a
        separator are returned unchanged.
    """
    _, separator, rest = stored_name.partition(_TIMESTAMP_SEPARATOR)
    return rest if separator else stored_name


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.pdf').

    Returns:
        Text after the last dot, lowercase (e.g., 'pdf').
        Returns empty string if there is no dot.
    """
    _, dot, extension = filename.rpartition('.')
    return extension.lower() if dot else ''


def detect_content_type(extension: str) -> str | None:
    """Map a file extension to a MIME type.

    There is deliberately no 'application/octet-stream' fallback.

    Args:
        extension: Lowercase extension without dot.

    Returns:
        MIME type, or None if the extension is not recognized.
    """
    if not extension:
        return None
    content_type = _CONTENT_TYPES.get(extension)
    if content_type is None:
        content_type, _ = mimetypes.guess_type(f'file.{extension}')
    return content_type


def is_inline(extension: str) -> bool:
    """Check whether files with this extension are shown in the browser.

    Args:
        extension: Lowercase extension without dot.

    Returns:
        True for inline disposition, False for attachment.
    """
    return extension in _INLINE_EXTENSIONS


def sanitize_filename(filename: str) -> str:
    """Make a filename safe for a Content-Disposition header.

    Args:
        filename: Raw filename.

    Returns:
        Filename with every character outside [A-Za-z0-9._-]
        replaced by an underscore.
    """
    return _UNSAFE_FILENAME_CHARS.sub('_', filename)


def content_disposition(filename: str, *, inline: bool) -> str:
    """Build a Content-Disposition header value.

    Args:
        filename: Filename offered to the client, sanitized here.
        inline: Render in the browser instead of downloading.

    Returns:
        Header value (e.g., 'inline; filename="report.pdf"').
    """
    disposition = 'inline' if inline else 'attachment'
    return f'{disposition}; filename="{sanitize_filename(filename)}"'


def parse_object_id(raw_id: str | None) -> uuid.UUID:
    """Parse a client-supplied object identifier.

    Args:
        raw_id: Identifier from the request, may be missing.

    Returns:
        Parsed UUID.

    Raises:
        ValidationError: If the identifier is missing or malformed.
    """
    if not raw_id:
        raise ValidationError('Invalid file id.', code='invalid_id')
    try:
        return uuid.UUID(raw_id)
    except ValueError as error:
        raise ValidationError(
            'Invalid file id.',
            code='invalid_id',
        ) from error
