from rest_framework import serializers

from .models import Idea, Priority, Task, TimeAllocation, TimeLog


class TaskSerializer(serializers.ModelSerializer):
    idea_title = serializers.CharField(source="idea.title", read_only=True, default=None)

    class Meta:
        model = Task
        fields = (
            "id", "idea", "idea_title", "title", "description", "status", "priority",
            "due_date", "tags", "position", "is_archived",
            "estimated_hours", "daily_allocation", "weekly_allocation",
            "monthly_allocation", "yearly_allocation", "time_spent",
            "is_recurring", "recurrence_type", "recurrence_interval",
            "recurrence_end_date", "recurrence_count", "parent_task",
            "created_at", "updated_at",
        )


class TaskWriteSerializer(serializers.ModelSerializer):
    idea_id = serializers.IntegerField(required=False, allow_null=True)
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)

    class Meta:
        model = Task
        fields = (
            "idea_id", "title", "description", "status", "priority", "due_date", "tags",
            "position", "estimated_hours", "daily_allocation", "weekly_allocation",
            "monthly_allocation", "yearly_allocation", "time_spent",
            "is_recurring", "recurrence_type", "recurrence_interval",
            "recurrence_end_date", "recurrence_count",
        )

    def validate(self, attrs):
        if attrs.get("is_recurring") and not attrs.get("recurrence_type") and not self.partial:
            raise serializers.ValidationError({"recurrence_type": "Recurring tasks need a recurrence type."})
        return attrs


class TaskFilterSerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, default="")
    priority = serializers.ChoiceField(choices=Priority.choices, required=False)
    tags = serializers.CharField(required=False, allow_blank=True, default="")
    archived = serializers.BooleanField(required=False, default=False)
    idea = serializers.IntegerField(required=False)

    def validate_tags(self, value):
        return [tag.strip() for tag in value.split(",") if tag.strip()]


class TaskStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Task.Status.choices)


class TaskArchiveSerializer(serializers.Serializer):
    is_archived = serializers.BooleanField(default=True)


class TaskMoveSerializer(serializers.Serializer):
    task_id = serializers.IntegerField()
    status = serializers.ChoiceField(choices=Task.Status.choices, required=False)
    position = serializers.IntegerField(required=False)


class TaskReorderSerializer(serializers.Serializer):
    updates = TaskMoveSerializer(many=True)


class IdeaSerializer(serializers.ModelSerializer):
    task_count = serializers.SerializerMethodField()

    class Meta:
        model = Idea
        fields = (
            "id", "title", "description", "rich_description", "category", "tags",
            "priority", "status", "task_count", "created_at", "updated_at",
        )

    def get_task_count(self, obj):
        return obj.tasks.count()


class IdeaWriteSerializer(serializers.ModelSerializer):
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)

    class Meta:
        model = Idea
        fields = ("title", "description", "rich_description", "category", "tags", "priority", "status")


class IdeaStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Idea.Status.choices)


class TimeAllocationSerializer(serializers.ModelSerializer):
    logged_seconds = serializers.SerializerMethodField()

    class Meta:
        model = TimeAllocation
        fields = (
            "id", "task", "task_name", "date", "allocated_minutes", "week_number",
            "logged_seconds", "user", "created_at",
        )

    def get_logged_seconds(self, obj):
        return sum(log.elapsed_seconds for log in obj.logs.all())


class TimeAllocationWriteSerializer(serializers.Serializer):
    task_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    task_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    date = serializers.DateField()
    allocated_minutes = serializers.IntegerField(min_value=1, max_value=24 * 60)


class DateQuerySerializer(serializers.Serializer):
    date = serializers.DateField()


class TimeLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = TimeLog
        fields = ("id", "allocation", "session_start", "session_end", "elapsed_seconds", "user", "created_at")


class TimeLogWriteSerializer(serializers.Serializer):
    allocation_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    session_start = serializers.DateTimeField()
    session_end = serializers.DateTimeField()
    elapsed_seconds = serializers.IntegerField(min_value=0)
