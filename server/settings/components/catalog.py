"""Document catalog settings."""

from server.settings.components import config

# Multipart part size for uploads, S3 rejects non-final parts below 5 MiB
CATALOG_CHUNK_SIZE = config(
    'CATALOG_CHUNK_SIZE',
    cast=int,
    default=5 * 1024 * 1024,
)

# Size of chunks yielded while streaming a download
CATALOG_READ_CHUNK_SIZE = config(
    'CATALOG_READ_CHUNK_SIZE',
    cast=int,
    default=64 * 1024,
)

# Spool every upload to a temporary file instead of keeping it in memory
FILE_UPLOAD_HANDLERS = (
    'django.core.files.uploadhandler.TemporaryFileUploadHandler',
)
