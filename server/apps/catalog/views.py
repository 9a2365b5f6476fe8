"""HTTP endpoints for the document catalog.

Views stay thin: they pull request fields, call the logic layer and
translate its exceptions into JSON error responses.
"""

import functools
import logging
from collections.abc import Callable
from typing import Final

from django.apps import apps
from django.core.exceptions import ValidationError
from django.http import (
    HttpRequest,
    HttpResponse,
    JsonResponse,
    StreamingHttpResponse,
)
from django.shortcuts import render
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from server.apps.catalog.exceptions import ObjectNotFoundError, StoreError
from server.apps.catalog.logic.catalog_view import (
    CatalogEntry,
    SortOrder,
    build_catalog,
    sort_entries,
)
from server.apps.catalog.logic.download_operations import (
    Download,
    open_download,
    open_preview,
)
from server.apps.catalog.logic.object_store import ObjectStore
from server.apps.catalog.logic.query_operations import (
    describe,
    get_document,
    list_documents,
    summarize,
)
from server.apps.catalog.logic.upload_operations import upload_document

_View = Callable[..., HttpResponse]

_FILE_FIELD: Final = 'file'
_LABEL_FIELD: Final = 'customFilename'

logger = logging.getLogger(__name__)


def _get_store() -> ObjectStore:
    """Get the object store created at startup.

    Returns:
        ObjectStore owned by the catalog app config.
    """
    return apps.get_app_config('catalog').object_store  # type: ignore[attr-defined]


def _error(message: str, status: int) -> JsonResponse:
    return JsonResponse({'message': message}, status=status)


def _catalog_errors(view: _View) -> _View:
    """Translate catalog exceptions into JSON error responses.

    ValidationError -> 400, ObjectNotFoundError -> 404,
    StoreError -> 500.
    """
    @functools.wraps(view)
    def decorator(request: HttpRequest, *args: object, **kwargs: object) -> HttpResponse:
        try:
            return view(request, *args, **kwargs)
        except ValidationError as exc:
            logger.info('Rejected request to %s: %s', request.path, exc.messages)
            return _error(' '.join(exc.messages), status=400)
        except ObjectNotFoundError:
            return _error('File not found.', status=404)
        except StoreError:
            logger.exception('Storage failure on %s', request.path)
            return _error('Storage error.', status=500)
    return decorator


def _stream(download: Download) -> StreamingHttpResponse:
    # Django closes the reader when the response is closed,
    # including when the client disconnects mid-download
    response = StreamingHttpResponse(
        download.reader,
        content_type=download.content_type,
    )
    response['Content-Disposition'] = download.content_disposition
    response['Content-Length'] = str(download.length)
    return response


@csrf_exempt
@require_POST
@_catalog_errors
def upload(request: HttpRequest) -> HttpResponse:
    """Store an uploaded document with its label."""
    stored_object = upload_document(
        _get_store(),
        request.FILES.get(_FILE_FIELD),
        request.POST.get(_LABEL_FIELD),
    )
    return JsonResponse({
        'message': 'File uploaded successfully.',
        'fileId': str(stored_object.id),
    })


@require_GET
@_catalog_errors
def files(request: HttpRequest) -> HttpResponse:
    """List every document, or describe one when ``id`` is given."""
    store = _get_store()
    raw_id = request.GET.get('id')
    if raw_id:
        return JsonResponse(summarize(get_document(store, raw_id)))
    return JsonResponse(
        [describe(document) for document in list_documents(store)],
        safe=False,
    )


@require_GET
@_catalog_errors
def download(request: HttpRequest) -> HttpResponse:
    """Stream a document with type-dependent disposition."""
    return _stream(open_download(_get_store(), request.GET.get('id')))


@require_GET
@_catalog_errors
def preview(request: HttpRequest) -> HttpResponse:
    """Stream a document as an inline PDF."""
    return _stream(open_preview(_get_store(), request.GET.get('id')))


def _catalog_entries() -> list[CatalogEntry]:
    return [
        CatalogEntry.from_stored_object(document)
        for document in list_documents(_get_store())
    ]


@require_GET
@_catalog_errors
def upload_page(request: HttpRequest) -> HttpResponse:
    """Render the upload form with the uploaded documents."""
    return render(request, 'catalog/upload.html', {
        'entries': sort_entries(_catalog_entries(), SortOrder.NEWEST),
    })


@require_GET
@_catalog_errors
def catalog(request: HttpRequest) -> HttpResponse:
    """Render the browsable catalog page."""
    page = build_catalog(
        _catalog_entries(),
        label=request.GET.get('label'),
        order=SortOrder.parse(request.GET.get('sort')),
    )
    return render(request, 'catalog/catalog.html', {
        'page': page,
        'sort_orders': list(SortOrder),
    })
