# customers/views.py
"""
Thin views that delegate to the commands layer.

Views handle: HTTP parsing, actor resolution, response formatting.
Commands handle: permission checks, business rules, cascades.
"""

from django.db.models import Count, Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import Capability, resolve_actor, require
from accounts.models import PermissionModule
from accounts.responses import failure_response
from .commands import (
    # Customer commands
    create_customer,
    batch_create_customers,
    update_customer,
    toggle_customer_active,
    deactivate_all_customers,
    delete_customer,
    delete_all_customers,
    # Group commands
    create_group,
    update_group,
    delete_group,
    # Student commands
    create_student,
    update_student,
    delete_student,
    # Import commands
    import_customers,
    rollback_import_batch,
)
from .models import Customer, CustomerImport, Student, StudentGroup
from .serializers import (
    CustomerSerializer,
    CustomerWriteSerializer,
    CustomerBatchSerializer,
    DeleteAllCustomersSerializer,
    StudentGroupSerializer,
    StudentGroupCreateSerializer,
    StudentGroupUpdateSerializer,
    RosterQuerySerializer,
    StudentSerializer,
    StudentCreateSerializer,
    StudentUpdateSerializer,
    CustomerImportSerializer,
    CustomerImportUploadSerializer,
)

MODULE = PermissionModule.CUSTOMERS


def _flag(value):
    if value is None:
        return None
    return value.lower() in ("1", "true", "yes")


def _query(serializer_class, request):
    serializer = serializer_class(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


# =============================================================================
# Customer Views
# =============================================================================

class CustomerListCreateView(APIView):
    """
    GET /customers/ -> list customers (?active=true|false, ?search=)
    POST /customers/ -> create customer
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        customers = Customer.objects.filter(workspace=actor.workspace)

        active = _flag(request.query_params.get("active"))
        if active is not None:
            customers = customers.filter(is_active=active)

        search = request.query_params.get("search", "").strip()
        if search:
            customers = customers.filter(
                Q(name__icontains=search)
                | Q(customer_number__icontains=search)
                | Q(email__icontains=search)
                | Q(city__icontains=search)
            )

        return Response(CustomerSerializer(customers, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = CustomerWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_customer(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(CustomerSerializer(result.data).data, status=status.HTTP_201_CREATED)


class CustomerDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        customer = get_object_or_404(Customer, pk=pk, workspace=actor.workspace)
        return Response(CustomerSerializer(customer).data)

    def patch(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = CustomerWriteSerializer(data=request.data, partial=True)
        input_serializer.is_valid(raise_exception=True)

        result = update_customer(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(CustomerSerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_customer(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(result.data)


class CustomerToggleActiveView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = toggle_customer_active(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(CustomerSerializer(result.data).data)


class CustomerBatchCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = CustomerBatchSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = batch_create_customers(actor, input_serializer.validated_data["customers"])
        if not result.success:
            return failure_response(result)

        return Response({"created": len(result.data)}, status=status.HTTP_201_CREATED)


class CustomerDeactivateAllView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        result = deactivate_all_customers(actor)
        if not result.success:
            return failure_response(result)

        return Response(result.data)


class CustomerDeleteAllView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = DeleteAllCustomersSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = delete_all_customers(actor, input_serializer.validated_data["confirm"])
        if not result.success:
            return failure_response(result)

        return Response(result.data)


# =============================================================================
# Student Group Views
# =============================================================================

class StudentGroupListCreateView(APIView):
    """
    GET /groups/ -> list groups (?customer=<id>)
    POST /groups/ -> create group for a customer
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        groups = StudentGroup.objects.filter(
            workspace=actor.workspace,
        ).select_related("customer").annotate(student_count=Count("students"))

        query = _query(RosterQuerySerializer, request)
        if "customer" in query:
            groups = groups.filter(customer_id=query["customer"])

        return Response(StudentGroupSerializer(groups, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = StudentGroupCreateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_group(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(StudentGroupSerializer(result.data).data, status=status.HTTP_201_CREATED)


class StudentGroupDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = StudentGroupUpdateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = update_group(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(StudentGroupSerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_group(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Student Views
# =============================================================================

class StudentListCreateView(APIView):
    """
    GET /students/ -> list students (?customer=<id> or ?group=<id>)
    POST /students/ -> create student
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        students = Student.objects.filter(workspace=actor.workspace).select_related("group")

        query = _query(RosterQuerySerializer, request)
        if "customer" in query:
            students = students.filter(customer_id=query["customer"])
        elif "group" in query:
            students = students.filter(group_id=query["group"])

        return Response(StudentSerializer(students, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = StudentCreateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_student(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(StudentSerializer(result.data).data, status=status.HTTP_201_CREATED)


class StudentDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = StudentUpdateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = update_student(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(StudentSerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_student(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Import Views
# =============================================================================

class CustomerImportListCreateView(APIView):
    """
    GET /imports/ -> import batches, newest first
    POST /imports/ -> upload a CSV/XLSX file (multipart "file", optional "mapping")
    """
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        batches = CustomerImport.objects.filter(
            workspace=actor.workspace,
        ).select_related("imported_by", "rolled_back_by")
        return Response(CustomerImportSerializer(batches, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = CustomerImportUploadSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        upload = input_serializer.validated_data["file"]

        result = import_customers(
            actor,
            file_name=upload.name,
            content=upload.read(),
            mapping=input_serializer.validated_data.get("mapping"),
        )
        if not result.success:
            return failure_response(result)

        return Response(result.data, status=status.HTTP_201_CREATED)


class CustomerImportDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id, batch_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        batch = get_object_or_404(CustomerImport, batch_id=batch_id, workspace=actor.workspace)
        return Response(CustomerImportSerializer(batch).data)


class CustomerImportRollbackView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id, batch_id):
        actor = resolve_actor(request, workspace_id)

        result = rollback_import_batch(actor, batch_id)
        if not result.success:
            return failure_response(result)

        return Response(result.data)
