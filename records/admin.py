"""
Django admin registration for persisted collections.

Each :class:`~records.models.RecordSlot` row is one whole collection,
so the admin is read-only: records are only ever added through the
validated submission path.
"""

from django.contrib import admin

from .models import RecordSlot


@admin.register(RecordSlot)
class RecordSlotAdmin(admin.ModelAdmin):
    list_display = ('key', 'size', 'updated_at')
    search_fields = ('key',)
    readonly_fields = ('key', 'value', 'updated_at')

    @admin.display(description='records')
    def size(self, obj):
        return len(obj.value) if isinstance(obj.value, list) else 0

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
