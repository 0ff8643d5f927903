# -*- coding: utf-8 -*-

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from projtrack.domain.models import PROJECT_STATUSES, Project


def completed_task_count(projects: Iterable[Project]) -> int:
    return sum(1 for p in projects for t in p.tasks if t.completed)


def total_task_count(projects: Iterable[Project]) -> int:
    return sum(len(p.tasks) for p in projects)


def total_time_spent(projects: Iterable[Project]) -> int:
    return sum(t.total_time for p in projects for t in p.tasks)


def pending_task_count(project: Project) -> int:
    return sum(1 for t in project.tasks if not t.completed)


def project_total_time(project: Project) -> int:
    return sum(t.total_time for t in project.tasks)


def progress_percent(project: Project) -> Optional[int]:
    """
    Share of completed tasks, only for projects with both dates set.
    An empty task list counts as denominator 1.
    """
    if not (project.start_date and project.end_date):
        return None
    done = sum(1 for t in project.tasks if t.completed)
    # half-up, so 12.5 -> 13
    return int(done / max(len(project.tasks), 1) * 100 + 0.5)


def project_counts_by_status(projects: Iterable[Project]) -> Dict[str, int]:
    counts = {s: 0 for s in PROJECT_STATUSES}
    for p in projects:
        counts[p.status] = counts.get(p.status, 0) + 1
    return counts


@dataclass(frozen=True)
class DashboardStats:
    project_count: int
    completed_tasks: int
    total_tasks: int
    total_time_ms: int
    by_status: Dict[str, int]


@dataclass(frozen=True)
class ProjectStats:
    task_count: int
    pending_tasks: int
    total_time_ms: int
    progress: Optional[int]


class StatsService:
    """
    Read-only folds over the project tree. Nothing is cached; call on every
    render.
    """

    def dashboard(self, projects: Iterable[Project]) -> DashboardStats:
        projects = tuple(projects)
        return DashboardStats(
            project_count=len(projects),
            completed_tasks=completed_task_count(projects),
            total_tasks=total_task_count(projects),
            total_time_ms=total_time_spent(projects),
            by_status=project_counts_by_status(projects),
        )

    def project(self, project: Project) -> ProjectStats:
        return ProjectStats(
            task_count=len(project.tasks),
            pending_tasks=pending_task_count(project),
            total_time_ms=project_total_time(project),
            progress=progress_percent(project),
        )
