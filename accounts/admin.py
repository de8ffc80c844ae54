# accounts/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User, UserProfile


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "role", "is_active", "date_joined")
    list_filter = ("role", "is_active", "is_staff")
    fieldsets = BaseUserAdmin.fieldsets + (("CarID", {"fields": ("role", "phone")}),)
    add_fieldsets = BaseUserAdmin.add_fieldsets + (("CarID", {"fields": ("email", "role", "phone")}),)


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "document_type", "document_number", "city", "department", "is_complete")
    search_fields = ("user__email", "document_number", "city")
    list_filter = ("document_type", "department")

    @admin.display(boolean=True, description="Completo")
    def is_complete(self, obj):
        return obj.is_complete
