"""
Record collection views.

Every collection is served from a single endpoint: ``GET`` lists its
records most-recent-first and ``POST`` submits a candidate record.  A
submission always answers with one flash message, the confirmation
text on success or the first failing validation reason otherwise.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from ..collections import COLLECTIONS, UnknownCollection, get_collection
from ..serializers.records import first_error, serializer_for
from ..services.submissions import error_flash, submit
from ..store import get_store
from ..validation import FORMAT_ERROR


def _collection_or_404(kind):
    try:
        return get_collection(kind)
    except UnknownCollection:
        raise NotFound(f'unknown collection: {kind}')


def _rejected(code, message, field, flash):
    return Response({
        'ok': False,
        'error': {'code': code, 'message': message, 'field': field},
        'flash': flash.as_dict(),
    }, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([AllowAny])
def collections_index(request):
    """Describe every collection with its storage key and size."""
    store = get_store()
    data: list[dict[str, object]] = []
    for c in COLLECTIONS.values():
        data.append({
            'kind': c.kind,
            'label': c.label,
            'key': c.key,
            'identity': list(c.identity),
            'count': store.count(c.kind),
        })
    return Response({'ok': True, 'data': data})


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def records(request, kind):
    """List a collection or submit a new record to it."""
    _collection_or_404(kind)
    if request.method == 'GET':
        return Response({'ok': True, 'data': get_store().list(kind)})

    serializer = serializer_for(kind)(data=request.data)
    if not serializer.is_valid():
        field, message = first_error(serializer.errors)
        return _rejected(FORMAT_ERROR, message, field, error_flash(message))

    submission = submit(kind, serializer.validated_data)
    if not submission.ok:
        result = submission.result
        return _rejected(result.code, result.reason, result.field, submission.flash)
    return Response({
        'ok': True,
        'data': submission.record,
        'flash': submission.flash.as_dict(),
    }, status=status.HTTP_201_CREATED)
