import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        ("accounts", "0001_initial"),
        ("finance", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Subscription",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("cost", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ("yearly_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ("billing_cycle", models.CharField(choices=[("monthly", "Monthly"), ("yearly", "Yearly")], default="monthly", max_length=10)),
                ("next_billing_date", models.DateField()),
                ("is_active", models.BooleanField(default=True)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("subscription", "Subscription"),
                            ("bill", "Bill"),
                            ("rent", "Rent"),
                            ("utility", "Utility"),
                            ("insurance", "Insurance"),
                            ("loan", "Loan"),
                            ("other", "Other"),
                        ],
                        default="subscription",
                        max_length=20,
                    ),
                ),
                ("is_necessary", models.BooleanField(default=True)),
                ("classification", models.CharField(blank=True, choices=[("business", "Business"), ("private", "Private")], max_length=10)),
                (
                    "category",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("ai", "AI"),
                            ("software", "Software"),
                            ("marketing", "Marketing"),
                            ("productivity", "Productivity"),
                            ("design", "Design"),
                            ("communication", "Communication"),
                            ("development", "Development"),
                            ("analytics", "Analytics"),
                            ("security", "Security"),
                            ("other", "Other"),
                        ],
                        max_length=20,
                    ),
                ),
                ("subcategory", models.CharField(blank=True, max_length=100)),
                ("workspace", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="%(app_label)s_%(class)s_set", to="accounts.workspace")),
            ],
            options={
                "ordering": ["next_billing_date", "name"],
            },
        ),
    ]
