from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Idea",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("rich_description", models.TextField(blank=True)),
                ("category", models.CharField(blank=True, max_length=100)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("priority", models.CharField(blank=True, choices=[("low", "Low"), ("medium", "Medium"), ("high", "High")], max_length=10)),
                ("status", models.CharField(choices=[("new", "New"), ("reviewing", "Reviewing"), ("converted", "Converted"), ("archived", "Archived")], default="new", max_length=20)),
                ("user", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("workspace", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="%(app_label)s_%(class)s_set", to="accounts.workspace")),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Task",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("status", models.CharField(choices=[("todo", "To do"), ("in_progress", "In progress"), ("completed", "Completed")], default="todo", max_length=20)),
                ("priority", models.CharField(choices=[("low", "Low"), ("medium", "Medium"), ("high", "High")], default="medium", max_length=10)),
                ("due_date", models.DateField(blank=True, null=True)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("position", models.IntegerField(default=0)),
                ("is_archived", models.BooleanField(default=False)),
                ("estimated_hours", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("daily_allocation", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("weekly_allocation", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("monthly_allocation", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("yearly_allocation", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("time_spent", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("is_recurring", models.BooleanField(default=False)),
                ("recurrence_type", models.CharField(blank=True, choices=[("daily", "Daily"), ("weekly", "Weekly"), ("monthly", "Monthly"), ("yearly", "Yearly")], max_length=10)),
                ("recurrence_interval", models.PositiveIntegerField(default=1)),
                ("recurrence_end_date", models.DateField(blank=True, null=True)),
                ("recurrence_count", models.PositiveIntegerField(blank=True, null=True)),
                ("idea", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="tasks", to="flow.idea")),
                ("parent_task", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="occurrences", to="flow.task")),
                ("user", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("workspace", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="%(app_label)s_%(class)s_set", to="accounts.workspace")),
            ],
            options={
                "ordering": ["position", "created_at"],
            },
        ),
        migrations.AddIndex(
            model_name="task",
            index=models.Index(fields=["workspace", "status"], name="task_status_idx"),
        ),
    ]
