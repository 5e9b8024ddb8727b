from django.contrib import admin

from .models import BudgetIncome, BudgetMonthlyOutgoing, BudgetOutgoing


@admin.register(BudgetIncome)
class BudgetIncomeAdmin(admin.ModelAdmin):
    list_display = ("workspace", "year", "month", "amount")
    list_filter = ("year",)


@admin.register(BudgetOutgoing)
class BudgetOutgoingAdmin(admin.ModelAdmin):
    list_display = ("name", "workspace", "category", "amount", "is_fixed")
    list_filter = ("category", "is_fixed")


@admin.register(BudgetMonthlyOutgoing)
class BudgetMonthlyOutgoingAdmin(admin.ModelAdmin):
    list_display = ("outgoing", "year", "month", "amount")
