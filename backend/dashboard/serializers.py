from rest_framework import serializers

from .models import DEFAULT_LAYOUT_NAME, DashboardLayout


class WidgetSerializer(serializers.Serializer):
    i = serializers.CharField(max_length=100)
    x = serializers.IntegerField(min_value=0)
    y = serializers.IntegerField(min_value=0)
    w = serializers.IntegerField(min_value=1)
    h = serializers.IntegerField(min_value=1)
    min_w = serializers.IntegerField(min_value=1, required=False)
    max_w = serializers.IntegerField(min_value=1, required=False)
    min_h = serializers.IntegerField(min_value=1, required=False)
    max_h = serializers.IntegerField(min_value=1, required=False)
    is_draggable = serializers.BooleanField(required=False)
    is_resizable = serializers.BooleanField(required=False)


class LayoutNameSerializer(serializers.Serializer):
    layout_name = serializers.CharField(max_length=100, required=False, default=DEFAULT_LAYOUT_NAME)


class SaveLayoutSerializer(LayoutNameSerializer):
    layout = WidgetSerializer(many=True)

    def validate_layout(self, value):
        keys = [widget["i"] for widget in value]
        if len(keys) != len(set(keys)):
            raise serializers.ValidationError("Widget keys must be unique.")
        return [dict(widget) for widget in value]


class DashboardLayoutSummarySerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="layout_name")

    class Meta:
        model = DashboardLayout
        fields = ("id", "name", "is_active", "created_at", "updated_at")
