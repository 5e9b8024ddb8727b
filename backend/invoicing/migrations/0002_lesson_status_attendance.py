from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    dependencies = [
        ("accounts", "0001_initial"),
        ("customers", "0001_initial"),
        ("invoicing", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.AddField(
            model_name="lesson",
            name="teacher",
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="taught_lessons", to=settings.AUTH_USER_MODEL),
        ),
        migrations.AddField(
            model_name="lesson",
            name="lesson_type",
            field=models.CharField(choices=[("in_person", "In person"), ("online", "Online")], default="in_person", max_length=20),
        ),
        migrations.AddField(
            model_name="lesson",
            name="status",
            field=models.CharField(
                choices=[
                    ("scheduled", "Scheduled"),
                    ("attended", "Attended"),
                    ("cancelled_on_time", "Cancelled on time"),
                    ("cancelled_late", "Cancelled late"),
                    ("missed", "Missed"),
                ],
                default="scheduled",
                max_length=20,
            ),
        ),
        migrations.AddField(
            model_name="lesson",
            name="cancelled_at",
            field=models.DateTimeField(blank=True, null=True),
        ),
        migrations.AddField(
            model_name="lesson",
            name="cancelled_by",
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL),
        ),
        migrations.AddField(
            model_name="lesson",
            name="cancellation_reason",
            field=models.TextField(blank=True),
        ),
        migrations.CreateModel(
            name="AttendanceReport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("general_notes", models.TextField(blank=True)),
                ("report_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("customer", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="attendance_reports", to="customers.customer")),
                ("group", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="attendance_reports", to="customers.studentgroup")),
                ("lesson", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="attendance_report", to="invoicing.lesson")),
                ("students_absent", models.ManyToManyField(blank=True, related_name="+", to="customers.student")),
                ("students_present", models.ManyToManyField(blank=True, related_name="+", to="customers.student")),
                ("workspace", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="%(app_label)s_%(class)s_set", to="accounts.workspace")),
            ],
            options={
                "ordering": ["-report_date", "-id"],
            },
        ),
        migrations.CreateModel(
            name="StudentProgress",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("progress_notes", models.TextField()),
                (
                    "skill_level",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("beginner", "Beginner"),
                            ("intermediate", "Intermediate"),
                            ("advanced", "Advanced"),
                            ("proficient", "Proficient"),
                        ],
                        max_length=20,
                    ),
                ),
                ("report", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="progress", to="invoicing.attendancereport")),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="progress_notes", to="customers.student")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.AddConstraint(
            model_name="studentprogress",
            constraint=models.UniqueConstraint(fields=("report", "student"), name="uniq_progress_per_report_student"),
        ),
    ]
