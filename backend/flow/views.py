# flow/views.py
"""
Flow API: the task board, the idea list and daily time allocations.
"""

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.authz import Capability, resolve_actor, require
from accounts.models import PermissionModule
from accounts.responses import failure_response
from .commands import (
    create_task,
    update_task,
    update_task_status,
    delete_task,
    reorder_tasks,
    archive_task,
    create_idea,
    update_idea,
    update_idea_status,
    delete_idea,
    create_time_allocation,
    delete_time_allocation,
    log_time,
)
from .filters import filter_tasks
from .models import Idea, Task, TimeAllocation, TimeLog
from .serializers import (
    TaskSerializer,
    TaskWriteSerializer,
    TaskFilterSerializer,
    TaskStatusSerializer,
    TaskArchiveSerializer,
    TaskReorderSerializer,
    IdeaSerializer,
    IdeaWriteSerializer,
    IdeaStatusSerializer,
    TimeAllocationSerializer,
    TimeAllocationWriteSerializer,
    DateQuerySerializer,
    TimeLogSerializer,
    TimeLogWriteSerializer,
)
from .summary import time_allocation_summary

MODULE = PermissionModule.FLOW


# =============================================================================
# Task Views
# =============================================================================

class TaskListCreateView(APIView):
    """
    GET /tasks/ -> list tasks (?search=, ?priority=, ?tags=a,b, ?archived=true, ?idea=)
    POST /tasks/ -> create task
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        query = TaskFilterSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        tasks = Task.objects.filter(workspace=actor.workspace).select_related("idea")
        if "idea" in params:
            tasks = tasks.filter(idea_id=params["idea"])

        tasks = filter_tasks(
            tasks,
            search=params["search"],
            priority=params.get("priority"),
            tags=params["tags"],
            include_archived=params["archived"],
        )
        return Response(TaskSerializer(tasks, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = TaskWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_task(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(TaskSerializer(result.data).data, status=status.HTTP_201_CREATED)


class TaskDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        task = get_object_or_404(Task, pk=pk, workspace=actor.workspace)
        return Response(TaskSerializer(task).data)

    def patch(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = TaskWriteSerializer(data=request.data, partial=True)
        input_serializer.is_valid(raise_exception=True)

        result = update_task(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(TaskSerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_task(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


class TaskStatusView(APIView):
    """POST /tasks/<pk>/status/ -> {"task": ..., "next_task": ... | null}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = TaskStatusSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = update_task_status(actor, pk, input_serializer.validated_data["status"])
        if not result.success:
            return failure_response(result)

        next_task = result.data["next_task"]
        return Response({
            "task": TaskSerializer(result.data["task"]).data,
            "next_task": TaskSerializer(next_task).data if next_task else None,
        })


class TaskArchiveView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = TaskArchiveSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = archive_task(actor, pk, input_serializer.validated_data["is_archived"])
        if not result.success:
            return failure_response(result)

        return Response(TaskSerializer(result.data).data)


class TaskReorderView(APIView):
    """POST /tasks/reorder/ {"updates": [{"task_id", "status"?, "position"?}, ...]}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = TaskReorderSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = reorder_tasks(actor, input_serializer.validated_data["updates"])
        if not result.success:
            return failure_response(result)

        return Response(result.data)


class TimeAllocationSummaryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        return Response(time_allocation_summary(actor.workspace))


# =============================================================================
# Idea Views
# =============================================================================

class IdeaListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        ideas = Idea.objects.filter(workspace=actor.workspace)
        return Response(IdeaSerializer(ideas, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = IdeaWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_idea(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(IdeaSerializer(result.data).data, status=status.HTTP_201_CREATED)


class IdeaDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = IdeaWriteSerializer(data=request.data, partial=True)
        input_serializer.is_valid(raise_exception=True)

        result = update_idea(actor, pk, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(IdeaSerializer(result.data).data)

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_idea(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


class IdeaStatusView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        input_serializer = IdeaStatusSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = update_idea_status(actor, pk, input_serializer.validated_data["status"])
        if not result.success:
            return failure_response(result)

        return Response(IdeaSerializer(result.data).data)


class IdeaTasksView(APIView):
    """GET /ideas/<pk>/tasks/ -> tasks linked to the idea"""
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        idea = get_object_or_404(Idea, pk=pk, workspace=actor.workspace)
        return Response(TaskSerializer(idea.tasks.all(), many=True).data)


# =============================================================================
# Time Allocation Views
# =============================================================================

class TimeAllocationListCreateView(APIView):
    """
    GET /time-allocations/?date=YYYY-MM-DD -> allocations of the day with logged time
    POST /time-allocations/ -> plan minutes for a day
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        query = DateQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        allocations = TimeAllocation.objects.filter(
            workspace=actor.workspace, date=query.validated_data["date"],
        ).prefetch_related("logs")
        return Response(TimeAllocationSerializer(allocations, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = TimeAllocationWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = create_time_allocation(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(TimeAllocationSerializer(result.data).data, status=status.HTTP_201_CREATED)


class TimeAllocationDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, workspace_id, pk):
        actor = resolve_actor(request, workspace_id)

        result = delete_time_allocation(actor, pk)
        if not result.success:
            return failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


class TimeLogListCreateView(APIView):
    """
    GET /time-logs/?date=YYYY-MM-DD -> sessions started that day
    POST /time-logs/ -> record a session
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)
        require(actor, MODULE, Capability.VIEW)

        query = DateQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        logs = TimeLog.objects.filter(
            workspace=actor.workspace, session_start__date=query.validated_data["date"],
        )
        return Response(TimeLogSerializer(logs, many=True).data)

    def post(self, request, workspace_id):
        actor = resolve_actor(request, workspace_id)

        input_serializer = TimeLogWriteSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = log_time(actor, **input_serializer.validated_data)
        if not result.success:
            return failure_response(result)

        return Response(TimeLogSerializer(result.data).data, status=status.HTTP_201_CREATED)
