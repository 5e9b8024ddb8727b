from django.contrib import admin

from .models import LiquidityBalance, MonthlyValuation, SimpleAsset, SimpleLiability, Subscription


@admin.register(SimpleAsset)
class SimpleAssetAdmin(admin.ModelAdmin):
    list_display = ("name", "workspace", "type", "current_value", "sort_order")
    list_filter = ("type",)


@admin.register(SimpleLiability)
class SimpleLiabilityAdmin(admin.ModelAdmin):
    list_display = ("name", "workspace", "type", "current_balance")


@admin.register(MonthlyValuation)
class MonthlyValuationAdmin(admin.ModelAdmin):
    list_display = ("item_type", "item_id", "year", "month", "value")
    list_filter = ("item_type", "year")


@admin.register(LiquidityBalance)
class LiquidityBalanceAdmin(admin.ModelAdmin):
    list_display = ("month", "asset", "liability", "balance")
    list_filter = ("month",)


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = ("name", "workspace", "cost", "billing_cycle", "next_billing_date", "is_active", "is_necessary")
    list_filter = ("billing_cycle", "is_active", "type", "classification")
    search_fields = ("name",)
