from django.contrib import admin

from .models import DashboardLayout


@admin.register(DashboardLayout)
class DashboardLayoutAdmin(admin.ModelAdmin):
    list_display = ("layout_name", "user", "workspace", "is_active", "updated_at")
