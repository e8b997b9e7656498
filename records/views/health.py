from django.http import JsonResponse

from ..collections import COLLECTIONS
from ..store import get_store

def healthz(request):
    try:
        store = get_store()
        sizes = {kind: store.count(kind) for kind in COLLECTIONS}
        return JsonResponse({'ok': True, 'storage': type(store.kv).__name__, 'collections': sizes})
    except Exception as e:
        return JsonResponse({'ok': False, 'error': str(e)}, status=500)
