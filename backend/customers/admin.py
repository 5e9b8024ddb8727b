from django.contrib import admin

from .models import Customer, CustomerImport, Student, StudentGroup


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "customer_number", "workspace", "is_active", "import_batch_id")
    list_filter = ("is_active",)
    search_fields = ("name", "customer_number", "email")


@admin.register(StudentGroup)
class StudentGroupAdmin(admin.ModelAdmin):
    list_display = ("name", "customer", "is_active")


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ("first_name", "last_name", "customer", "group")
    search_fields = ("first_name", "last_name", "email")


@admin.register(CustomerImport)
class CustomerImportAdmin(admin.ModelAdmin):
    list_display = ("batch_id", "workspace", "file_name", "customer_count", "status", "created_at")
    list_filter = ("status",)
