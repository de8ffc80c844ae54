# transfers/admin.py
from django.contrib import admin
from .models import Transfer, TransferDocument


class TransferDocumentInline(admin.TabularInline):
    model = TransferDocument
    extra = 0
    fields = ("document_type", "file_name", "file_url", "is_required", "is_verified", "uploaded_by", "uploaded_at")
    readonly_fields = ("document_type", "file_name", "file_url", "is_required", "uploaded_by", "uploaded_at")
    can_delete = False


@admin.register(Transfer)
class TransferAdmin(admin.ModelAdmin):
    list_display = ("id", "vehicle", "seller", "buyer", "status", "sale_price", "transfer_date", "completion_date")
    search_fields = ("vehicle__vin", "vehicle__license_plate", "seller__email", "buyer__email")
    list_filter = ("status",)
    inlines = [TransferDocumentInline]

    def get_readonly_fields(self, request, obj=None):
        # status e dono só mudam pelo fluxo (transfers.services); aqui só se anota
        if obj is None:
            return ()
        return [f.name for f in self.model._meta.fields if f.name != "admin_notes"]

    def has_add_permission(self, request):
        return False


@admin.register(TransferDocument)
class TransferDocumentAdmin(admin.ModelAdmin):
    list_display = ("file_name", "transfer", "document_type", "is_required", "is_verified", "uploaded_at")
    list_filter = ("document_type", "is_required", "is_verified")
    readonly_fields = ("transfer", "document_type", "file_url", "file_name", "content_type", "size", "uploaded_by")
