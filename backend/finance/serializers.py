from rest_framework import serializers

from .models import (
    LiquidityBalance,
    MonthlyValuation,
    SimpleAsset,
    SimpleLiability,
    Subscription,
    month_key_validator,
)


class MonthQuerySerializer(serializers.Serializer):
    month = serializers.CharField(validators=[month_key_validator])


class SimpleAssetSerializer(serializers.ModelSerializer):
    class Meta:
        model = SimpleAsset
        fields = (
            "id", "name", "type", "current_value", "purchase_value", "purchase_date",
            "sort_order", "created_at", "updated_at",
        )


class SimpleAssetWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = SimpleAsset
        fields = ("name", "type", "current_value", "purchase_value", "purchase_date")


class ReorderSerializer(serializers.Serializer):
    direction = serializers.ChoiceField(choices=["up", "down"])


class SimpleLiabilitySerializer(serializers.ModelSerializer):
    class Meta:
        model = SimpleLiability
        fields = (
            "id", "name", "type", "current_balance", "original_amount", "interest_rate",
            "monthly_payment", "created_at", "updated_at",
        )


class SimpleLiabilityWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = SimpleLiability
        fields = ("name", "type", "current_balance", "original_amount", "interest_rate", "monthly_payment")


class MonthlyValuationSerializer(serializers.ModelSerializer):
    class Meta:
        model = MonthlyValuation
        fields = ("id", "item_type", "item_id", "year", "month", "value", "notes", "created_at")


class MonthlyValuationWriteSerializer(serializers.Serializer):
    item_type = serializers.ChoiceField(choices=MonthlyValuation.ItemType.choices)
    item_id = serializers.IntegerField(min_value=1)
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)
    value = serializers.DecimalField(max_digits=14, decimal_places=2)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class ValuationFilterSerializer(serializers.Serializer):
    item_type = serializers.ChoiceField(choices=MonthlyValuation.ItemType.choices, required=False)
    item_id = serializers.IntegerField(required=False)
    year = serializers.IntegerField(required=False)
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)


class LiquidityBalanceSerializer(serializers.ModelSerializer):
    account_name = serializers.SerializerMethodField()
    is_liability = serializers.BooleanField(read_only=True)

    class Meta:
        model = LiquidityBalance
        fields = (
            "id", "asset", "liability", "account_name", "is_liability",
            "month", "balance", "notes", "updated_at",
        )

    def get_account_name(self, obj):
        account = obj.account
        return account.name if account else None


class LiquidityBalanceWriteSerializer(serializers.Serializer):
    asset_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    liability_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    month = serializers.CharField(validators=[month_key_validator])
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if (attrs["asset_id"] is None) == (attrs["liability_id"] is None):
            raise serializers.ValidationError("Give exactly one of asset_id or liability_id.")
        return attrs


class SubscriptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Subscription
        fields = (
            "id", "name", "cost", "yearly_amount", "billing_cycle", "next_billing_date", "is_active",
            "type", "is_necessary", "classification", "category", "subcategory",
            "created_at", "updated_at",
        )


class SubscriptionWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Subscription
        fields = (
            "name", "cost", "yearly_amount", "billing_cycle", "next_billing_date", "is_active",
            "type", "is_necessary", "classification", "category", "subcategory",
        )


class SubscriptionFilterSerializer(serializers.Serializer):
    active = serializers.BooleanField(required=False, allow_null=True, default=None)
    classification = serializers.ChoiceField(choices=Subscription.Classification.choices, required=False)
