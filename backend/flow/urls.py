# flow/urls.py
"""
URL configuration for flow API (mounted under /api/workspaces/<id>/flow/).

Endpoints:
- /tasks/ - Task board, filtering, status moves, reordering, archiving
- /tasks/summary/ - Planned and spent time across tasks
- /ideas/ - Ideas and the tasks linked to them
- /time-allocations/, /time-logs/ - Daily planned minutes and timed work sessions
"""

from django.urls import path

from .views import (
    TaskListCreateView,
    TaskDetailView,
    TaskStatusView,
    TaskArchiveView,
    TaskReorderView,
    TimeAllocationSummaryView,
    IdeaListCreateView,
    IdeaDetailView,
    IdeaStatusView,
    IdeaTasksView,
    TimeAllocationListCreateView,
    TimeAllocationDetailView,
    TimeLogListCreateView,
)

app_name = "flow"

urlpatterns = [
    path("tasks/", TaskListCreateView.as_view(), name="task-list-create"),
    path("tasks/reorder/", TaskReorderView.as_view(), name="task-reorder"),
    path("tasks/summary/", TimeAllocationSummaryView.as_view(), name="task-summary"),
    path("tasks/<int:pk>/", TaskDetailView.as_view(), name="task-detail"),
    path("tasks/<int:pk>/status/", TaskStatusView.as_view(), name="task-status"),
    path("tasks/<int:pk>/archive/", TaskArchiveView.as_view(), name="task-archive"),
    path("ideas/", IdeaListCreateView.as_view(), name="idea-list-create"),
    path("ideas/<int:pk>/", IdeaDetailView.as_view(), name="idea-detail"),
    path("ideas/<int:pk>/status/", IdeaStatusView.as_view(), name="idea-status"),
    path("ideas/<int:pk>/tasks/", IdeaTasksView.as_view(), name="idea-tasks"),
    path("time-allocations/", TimeAllocationListCreateView.as_view(), name="time-allocation-list-create"),
    path("time-allocations/<int:pk>/", TimeAllocationDetailView.as_view(), name="time-allocation-detail"),
    path("time-logs/", TimeLogListCreateView.as_view(), name="time-log-list-create"),
]
