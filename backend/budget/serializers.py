from rest_framework import serializers

from .models import BudgetIncome, BudgetMonthlyOutgoing, BudgetOutgoing


class PeriodSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)


class YearSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100)


class HistorySerializer(serializers.Serializer):
    months = serializers.IntegerField(min_value=1, max_value=60, default=6)


class BudgetIncomeSerializer(serializers.ModelSerializer):
    class Meta:
        model = BudgetIncome
        fields = ("id", "year", "month", "amount", "notes", "created_at", "updated_at")


class BudgetIncomeWriteSerializer(PeriodSerializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class BudgetOutgoingSerializer(serializers.ModelSerializer):
    class Meta:
        model = BudgetOutgoing
        fields = ("id", "name", "category", "amount", "is_fixed", "notes", "created_at", "updated_at")


class BudgetOutgoingWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = BudgetOutgoing
        fields = ("name", "category", "amount", "is_fixed", "notes")


class BudgetMonthlyOutgoingSerializer(serializers.ModelSerializer):
    outgoing_name = serializers.CharField(source="outgoing.name", read_only=True)

    class Meta:
        model = BudgetMonthlyOutgoing
        fields = ("id", "outgoing", "outgoing_name", "year", "month", "amount", "updated_at")


class BudgetMonthlyOutgoingWriteSerializer(PeriodSerializer):
    outgoing_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
