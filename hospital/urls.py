"""
URL configuration for the hospital records project.

The `urlpatterns` list routes URLs to views.  This module includes
both the Django admin and the record API routes provided by the
records app.  OpenAPI documentation is exposed at ``/swagger/`` and
``/redoc/``; Prometheus metrics at ``/metrics``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="Hospital Records API",
    default_version='v1',
    description="Append-only departments, doctors, patients, clinical events and rooms.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    # Django admin site (read-only view of persisted collections)
    path('admin/', admin.site.urls),
    # Include API routes from the records app
    path('', include('records.routers')),
    path('', include('django_prometheus.urls')),
    # Swagger and ReDoc
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
