"""
URL mappings for the records API.

One endpoint serves every collection, keyed by its kind
(``departments``, ``all_doctors``, ``patients`` ...).  Trailing slashes
are omitted to match the front end's request paths.
"""
from django.urls import path

from .views.health import healthz
from .views.records import collections_index, records

urlpatterns = [
    path('api/collections', collections_index, name='collections_index'),
    path('api/records/<str:kind>', records, name='records'),
    path('api/healthz', healthz, name='healthz'),
]
