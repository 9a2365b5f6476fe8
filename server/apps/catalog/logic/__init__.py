"""Business logic layer for catalog app.

This package contains all business logic for the document catalog:
- Object store adapter (chunked writes, streamed reads, enumeration)
- Upload pipeline
- Catalog queries and catalog page view-model
- Download and preview streams

All business logic should be implemented here, separate from
models (data layer), infrastructure (external systems) and views.
"""
