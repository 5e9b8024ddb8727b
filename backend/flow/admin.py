from django.contrib import admin

from .models import Idea, Task, TimeAllocation, TimeLog


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ("title", "workspace", "status", "priority", "due_date", "is_recurring", "is_archived")
    list_filter = ("status", "priority", "is_recurring", "is_archived")
    search_fields = ("title", "description")


@admin.register(Idea)
class IdeaAdmin(admin.ModelAdmin):
    list_display = ("title", "workspace", "status", "category")
    list_filter = ("status",)
    search_fields = ("title",)


@admin.register(TimeAllocation)
class TimeAllocationAdmin(admin.ModelAdmin):
    list_display = ("task_name", "workspace", "date", "week_number", "allocated_minutes", "user")
    list_filter = ("week_number",)


@admin.register(TimeLog)
class TimeLogAdmin(admin.ModelAdmin):
    list_display = ("session_start", "workspace", "allocation", "elapsed_seconds", "user")
