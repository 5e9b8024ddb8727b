# budget/views.py
"""
Budget API.

Reads (summary, yearly view, history, effective outgoings) are computed on
the fly by budget.calculations; writes go through budget.commands.
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import Capability, resolve_actor, require
from accounts.models import PermissionModule
from accounts.responses import failure_response
from .calculations import budget_history, budget_summary, effective_outgoings, yearly_budget
from .commands import (
    set_budget_income,
    create_budget_outgoing,
    update_budget_outgoing,
    delete_budget_outgoing,
    set_budget_monthly_outgoing,
    delete_budget_monthly_outgoing,
)
from .models import BudgetIncome, BudgetMonthlyOutgoing, BudgetOutgoing
from .serializers import (
    PeriodSerializer,
    YearSerializer,
    HistorySerializer,
    BudgetIncomeSerializer,
    BudgetIncomeWriteSerializer,
    BudgetOutgoingSerializer,
    BudgetOutgoingWriteSerializer,
    BudgetMonthlyOutgoingSerializer,
    BudgetMonthlyOutgoingWriteSerializer,
)

MODULE = PermissionModule.BUDGET


def _query(serializer_class, request):
    serializer = serializer_class(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


# =============================================================================
# Income
# =============================================================================

class BudgetIncomeView(APIView):
    """
    GET /income/?year=&month= -> income of the month (null if unset)
    PUT /income/ -> set income of a month
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        period = _query(PeriodSerializer, request)
        income = BudgetIncome.objects.filter(workspace=actor.workspace, **period).first()
        return Response(BudgetIncomeSerializer(income).data if income else None)

    def put(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = BudgetIncomeWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = set_budget_income(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(BudgetIncomeSerializer(result.data).data)


# =============================================================================
# Outgoings
# =============================================================================

class BudgetOutgoingListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        outgoings = BudgetOutgoing.objects.filter(workspace=actor.workspace)
        return Response(BudgetOutgoingSerializer(outgoings, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = BudgetOutgoingWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_budget_outgoing(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(BudgetOutgoingSerializer(result.data).data, status=status.HTTP_201_CREATED)


class BudgetOutgoingDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = BudgetOutgoingWriteSerializer(data=request.data, partial=True)
        input_serializer.is_valid(raise_exception=True)

        result = update_budget_outgoing(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(BudgetOutgoingSerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_budget_outgoing(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


class EffectiveOutgoingsView(APIView):
    """GET /outgoings/effective/?year=&month= -> outgoings with overrides applied"""
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        period = _query(PeriodSerializer, request)
        return Response(effective_outgoings(actor.workspace, period["year"], period["month"]))


# =============================================================================
# Monthly overrides
# =============================================================================

class MonthlyOverrideListSetView(APIView):
    """
    GET /overrides/?year=&month= -> overrides of the month
    PUT /overrides/ -> set an outgoing's amount for one month
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        period = _query(PeriodSerializer, request)
        overrides = BudgetMonthlyOutgoing.objects.filter(
            workspace=actor.workspace, **period,
        ).select_related("outgoing")
        return Response(BudgetMonthlyOutgoingSerializer(overrides, many=True).data)

    def put(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = BudgetMonthlyOutgoingWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = set_budget_monthly_outgoing(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(BudgetMonthlyOutgoingSerializer(result.data).data)


class MonthlyOverrideDeleteView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, workspace_id, outgoing_id, year, month):
        actor = resolve_actor(request, workspace_id)

        result = delete_budget_monthly_outgoing(actor, outgoing_id, year, month)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Aggregates
# =============================================================================

class BudgetSummaryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        period = _query(PeriodSerializer, request)
        return Response(budget_summary(actor.workspace, period["year"], period["month"]))


class YearlyBudgetView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        year = _query(YearSerializer, request)["year"]
        return Response(yearly_budget(actor.workspace, year))


class BudgetHistoryView(APIView):
    """GET /history/?months=6 -> last N months, oldest first"""
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        months = _query(HistorySerializer, request)["months"]
        return Response(budget_history(actor.workspace, months))
