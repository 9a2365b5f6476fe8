"""Infrastructure layer for catalog app.

This package contains integrations with external systems:
- S3-compatible storage backend with multipart (chunked) streams
- Filename, content type and disposition helpers

Keep infrastructure concerns separate from business logic.
"""
