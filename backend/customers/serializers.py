from rest_framework import serializers

from .models import Customer, CustomerImport, Student, StudentGroup


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        exclude = ("workspace",)


class CustomerWriteSerializer(serializers.ModelSerializer):
    """Input for create and (partial) update."""

    name = serializers.CharField(max_length=255, required=False, allow_blank=True)

    class Meta:
        model = Customer
        exclude = ("id", "workspace", "import_batch_id", "created_at", "updated_at")


class CustomerBatchSerializer(serializers.Serializer):
    customers = CustomerWriteSerializer(many=True)


class DeleteAllCustomersSerializer(serializers.Serializer):
    confirm = serializers.CharField()


class StudentGroupSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name", read_only=True)
    student_count = serializers.IntegerField(read_only=True, default=None)

    class Meta:
        model = StudentGroup
        fields = (
            "id", "customer", "customer_name", "name", "notes", "is_active",
            "student_count", "created_at", "updated_at",
        )


class StudentGroupCreateSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField()
    name = serializers.CharField(max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class StudentGroupUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)


class RosterQuerySerializer(serializers.Serializer):
    customer = serializers.IntegerField(required=False)
    group = serializers.IntegerField(required=False)


class StudentSerializer(serializers.ModelSerializer):
    group_name = serializers.CharField(source="group.name", read_only=True, default=None)

    class Meta:
        model = Student
        fields = (
            "id", "customer", "group", "group_name", "first_name", "last_name",
            "email", "phone", "notes", "is_active", "created_at", "updated_at",
        )


class StudentCreateSerializer(serializers.Serializer):
    customer_id = serializers.IntegerField()
    group_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    email = serializers.CharField(max_length=254, required=False, allow_blank=True, default="")
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class StudentUpdateSerializer(serializers.Serializer):
    group_id = serializers.IntegerField(required=False, allow_null=True)
    first_name = serializers.CharField(max_length=150, required=False)
    last_name = serializers.CharField(max_length=150, required=False)
    email = serializers.CharField(max_length=254, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)


class CustomerImportSerializer(serializers.ModelSerializer):
    imported_by_email = serializers.EmailField(source="imported_by.email", read_only=True, default=None)
    rolled_back_by_email = serializers.EmailField(source="rolled_back_by.email", read_only=True, default=None)

    class Meta:
        model = CustomerImport
        fields = (
            "id", "batch_id", "file_name", "customer_count", "status",
            "imported_by_email", "rolled_back_at", "rolled_back_by_email", "created_at",
        )


class CustomerImportUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
    mapping = serializers.JSONField(required=False, default=None)
