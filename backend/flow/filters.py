# flow/filters.py
"""
Task list filtering.

Tags live in a JSON list, so the any-of tag match runs in Python after the
database has applied the other filters.
"""
from typing import Iterable, Optional

from django.db.models import Q


def filter_tasks(
    queryset,
    search: str = "",
    priority: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
    include_archived: bool = False,
) -> list:
    if not include_archived:
        queryset = queryset.filter(is_archived=False)
    if search:
        queryset = queryset.filter(Q(title__icontains=search) | Q(description__icontains=search))
    if priority:
        queryset = queryset.filter(priority=priority)

    wanted = {tag for tag in (tags or []) if tag}
    if not wanted:
        return list(queryset)
    return [task for task in queryset if wanted.intersection(task.tags or [])]
