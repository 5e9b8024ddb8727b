# finance/views.py
"""
Simple finance API: assets, liabilities, monthly valuations, liquidity and
recurring subscriptions.

Liquidity, net worth, progress and subscription totals are computed per request by
finance.calculations.
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import Capability, resolve_actor, require
from accounts.models import PermissionModule
from accounts.responses import failure_response
from .calculations import liquidity_for_month, liquidity_history, net_worth, progress, subscription_totals
from .commands import (
    create_asset,
    update_asset,
    delete_asset,
    reorder_asset,
    create_liability,
    update_liability,
    delete_liability,
    create_monthly_valuation,
    record_monthly_balance,
    delete_monthly_balance,
    reset_liquidity_history,
    create_subscription,
    update_subscription,
    delete_subscription,
)
from .models import LiquidityBalance, MonthlyValuation, SimpleAsset, SimpleLiability, Subscription
from .serializers import (
    MonthQuerySerializer,
    SimpleAssetSerializer,
    SimpleAssetWriteSerializer,
    ReorderSerializer,
    SimpleLiabilitySerializer,
    SimpleLiabilityWriteSerializer,
    MonthlyValuationSerializer,
    MonthlyValuationWriteSerializer,
    ValuationFilterSerializer,
    LiquidityBalanceSerializer,
    LiquidityBalanceWriteSerializer,
    SubscriptionSerializer,
    SubscriptionWriteSerializer,
    SubscriptionFilterSerializer,
)

MODULE = PermissionModule.FINANCE


def _query(serializer_class, request):
    serializer = serializer_class(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


# =============================================================================
# Assets
# =============================================================================

class AssetListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        assets = SimpleAsset.objects.filter(workspace=actor.workspace)
        return Response(SimpleAssetSerializer(assets, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = SimpleAssetWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_asset(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(SimpleAssetSerializer(result.data).data, status=status.HTTP_201_CREATED)


class AssetDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = SimpleAssetWriteSerializer(data=request.data, partial=True)
        input_serializer.is_valid(raise_exception=True)

        result = update_asset(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(SimpleAssetSerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_asset(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


class AssetReorderView(APIView):
    """POST /assets/<pk>/reorder/ {"direction": "up"|"down"}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = ReorderSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = reorder_asset(actor, pk, input_serializer.validated_data["direction"])
        if not result.success:
            return failure_response(result)

        assets = SimpleAsset.objects.filter(workspace=actor.workspace)
        return Response(SimpleAssetSerializer(assets, many=True).data)


# =============================================================================
# Liabilities
# =============================================================================

class LiabilityListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        liabilities = SimpleLiability.objects.filter(workspace=actor.workspace)
        return Response(SimpleLiabilitySerializer(liabilities, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = SimpleLiabilityWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_liability(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(SimpleLiabilitySerializer(result.data).data, status=status.HTTP_201_CREATED)


class LiabilityDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = SimpleLiabilityWriteSerializer(data=request.data, partial=True)
        input_serializer.is_valid(raise_exception=True)

        result = update_liability(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(SimpleLiabilitySerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_liability(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Valuations
# =============================================================================

class ValuationListCreateView(APIView):
    """
    GET /valuations/?item_type=&item_id=&year=&month= -> newest period first
    POST /valuations/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        filters = _query(ValuationFilterSerializer, request)
        valuations = MonthlyValuation.objects.filter(workspace=actor.workspace, **filters)
        return Response(MonthlyValuationSerializer(valuations, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = MonthlyValuationWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_monthly_valuation(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(MonthlyValuationSerializer(result.data).data, status=status.HTTP_201_CREATED)


# =============================================================================
# Liquidity
# =============================================================================

class BalanceListRecordView(APIView):
    """
    GET /balances/?month=YYYY-MM -> balances recorded for the month
    PUT /balances/ -> record an account's balance for a month
    DELETE /balances/ -> reset the workspace's liquidity history
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        month = _query(MonthQuerySerializer, request)["month"]
        balances = LiquidityBalance.objects.filter(
            workspace=actor.workspace, month=month,
        ).select_related("asset", "liability")
        return Response(LiquidityBalanceSerializer(balances, many=True).data)

    def put(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = LiquidityBalanceWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = record_monthly_balance(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(LiquidityBalanceSerializer(result.data).data)

    def delete(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        result = reset_liquidity_history(actor)
        if not result.success:
            return failure_response(result)

        return Response(result.data)


class BalanceDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_monthly_balance(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


class LiquidityView(APIView):
    """GET /liquidity/?month=YYYY-MM"""
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        month = _query(MonthQuerySerializer, request)["month"]
        return Response(liquidity_for_month(actor.workspace, month))


class LiquidityHistoryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        return Response(liquidity_history(actor.workspace))


class NetWorthView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        return Response(net_worth(actor.workspace))


class ProgressView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        return Response(progress(actor.workspace))


# =============================================================================
# Subscriptions
# =============================================================================

class SubscriptionListCreateView(APIView):
    """
    GET /subscriptions/ -> subscriptions by next billing date (?active=, ?classification=)
    POST /subscriptions/ -> create subscription
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        query = _query(SubscriptionFilterSerializer, request)
        subscriptions = Subscription.objects.filter(workspace=actor.workspace)
        if query.get("active") is not None:
            subscriptions = subscriptions.filter(is_active=query["active"])
        if "classification" in query:
            subscriptions = subscriptions.filter(classification=query["classification"])

        return Response(SubscriptionSerializer(subscriptions, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = SubscriptionWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_subscription(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(SubscriptionSerializer(result.data).data, status=status.HTTP_201_CREATED)


class SubscriptionDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = SubscriptionWriteSerializer(data=request.data, partial=True)
        input_serializer.is_valid(raise_exception=True)

        result = update_subscription(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(SubscriptionSerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_subscription(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


class SubscriptionTotalsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        return Response(subscription_totals(actor.workspace))
