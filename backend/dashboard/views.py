# dashboard/views.py

from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import resolve_actor
from accounts.responses import failure_response
from .commands import get_dashboard_layout, list_user_layouts, reset_dashboard_layout, save_dashboard_layout
from .serializers import DashboardLayoutSummarySerializer, LayoutNameSerializer, SaveLayoutSerializer


class DashboardLayoutView(APIView):
    """
    GET /layout/?layout_name= -> stored layout or the default one
    PUT /layout/ {"layout": [...], "layout_name"?} -> save
    DELETE /layout/?layout_name= -> reset, returns the default layout
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        query = LayoutNameSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        return Response(get_dashboard_layout(actor, query.validated_data["layout_name"]))

    def put(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = SaveLayoutSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = save_dashboard_layout(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response({"success": True, "layout": result.data.layout})

    def delete(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        query = LayoutNameSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = reset_dashboard_layout(actor, query.validated_data["layout_name"])
        if not result.success:
            return failure_response(result)

        return Response(result.data)


class DashboardLayoutListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        layouts = list_user_layouts(actor)
        return Response(DashboardLayoutSummarySerializer(layouts, many=True).data)
