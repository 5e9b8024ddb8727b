from django.conf import settings
import django.core.validators
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
            name="SimpleAsset",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("type", models.CharField(max_length=50)),
                ("current_value", models.DecimalField(decimal_places=2, max_digits=14)),
                ("purchase_value", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("purchase_date", models.DateField(blank=True, null=True)),
                ("sort_order", models.IntegerField(default=0)),
                ("workspace", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="%(app_label)s_%(class)s_set", to="accounts.workspace")),
            ],
            options={
                "ordering": ["sort_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="SimpleLiability",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("type", models.CharField(max_length=50)),
                ("current_balance", models.DecimalField(decimal_places=2, max_digits=14)),
                ("original_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("interest_rate", models.DecimalField(blank=True, decimal_places=3, max_digits=6, null=True)),
                ("monthly_payment", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("workspace", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="%(app_label)s_%(class)s_set", to="accounts.workspace")),
            ],
            options={
                "ordering": ["name"],
                "verbose_name_plural": "Simple liabilities",
            },
        ),
        migrations.CreateModel(
            name="MonthlyValuation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("item_type", models.CharField(choices=[("asset", "Asset"), ("liability", "Liability")], max_length=20)),
                ("item_id", models.PositiveBigIntegerField()),
                ("year", models.PositiveIntegerField()),
                ("month", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(12)])),
                ("value", models.DecimalField(decimal_places=2, max_digits=14)),
                ("notes", models.TextField(blank=True)),
                ("workspace", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="%(app_label)s_%(class)s_set", to="accounts.workspace")),
            ],
            options={
                "ordering": ["-year", "-month", "-id"],
            },
        ),
        migrations.AddIndex(
            model_name="monthlyvaluation",
            index=models.Index(fields=["workspace", "item_type", "item_id"], name="valuation_item_idx"),
        ),
        migrations.CreateModel(
            name="LiquidityBalance",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("month", models.CharField(max_length=7, validators=[django.core.validators.RegexValidator("^\\d{4}-(0[1-9]|1[0-2])$", "Month must look like YYYY-MM.")])),
                ("balance", models.DecimalField(decimal_places=2, max_digits=14)),
                ("notes", models.TextField(blank=True)),
                ("asset", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="balances", to="finance.simpleasset")),
                ("created_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("liability", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="balances", to="finance.simpleliability")),
                ("workspace", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="%(app_label)s_%(class)s_set", to="accounts.workspace")),
            ],
            options={
                "ordering": ["month", "id"],
            },
        ),
        migrations.AddIndex(
            model_name="liquiditybalance",
            index=models.Index(fields=["workspace", "month"], name="liquidity_month_idx"),
        ),
        migrations.AddConstraint(
            model_name="liquiditybalance",
            constraint=models.UniqueConstraint(condition=models.Q(("asset__isnull", False)), fields=("asset", "month"), name="uniq_asset_balance_month"),
        ),
        migrations.AddConstraint(
            model_name="liquiditybalance",
            constraint=models.UniqueConstraint(condition=models.Q(("liability__isnull", False)), fields=("liability", "month"), name="uniq_liability_balance_month"),
        ),
    ]
