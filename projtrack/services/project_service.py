# services/project_service.py
#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import datetime as dt
from dataclasses import replace
from typing import Callable, Iterable, Optional, Tuple

from projtrack.core.clock import Clock, new_id, now_ms
from projtrack.domain.models import (
    PROJECT_PRIORITIES,
    PROJECT_STATUSES,
    Project,
    Task,
    find_project,
    replace_project,
)

Tree = Tuple[Project, ...]

EDITABLE_FIELDS = ("name", "status", "priority", "start_date", "end_date", "notes")


def _parse_date(value: Optional[str]) -> Optional[dt.date]:
    value = (value or "").strip()
    if value == "":
        return None
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise ValueError("Invalid date. Use YYYY-MM-DD.")


class ProjectService:
    """
    Plain edits of the project tree. Every call takes the current tree and
    returns a new one; unknown ids give the tree back unchanged.
    """

    def __init__(self, clock: Clock = now_ms, id_factory: Callable[[], str] = new_id):
        self.clock = clock
        self.id_factory = id_factory

    # ---- projects ----
    def create_project(
        self,
        projects: Iterable[Project],
        name: str,
        status: str = "planning",
        priority: str = "medium",
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        notes: str = "",
    ) -> Tree:
        project = self._validated(
            Project(
                id=self.id_factory(),
                name=name,
                status=status,
                priority=priority,
                start_date=start_date,
                end_date=end_date,
                notes=notes or "",
                created_at=self.clock(),
            )
        )
        return tuple(projects) + (project,)

    def update_project(self, projects: Iterable[Project], project_id: str, **fields) -> Tree:
        projects = tuple(projects)
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot edit: {', '.join(sorted(unknown))}.")

        project = find_project(projects, project_id)
        if project is None:
            return projects
        return replace_project(projects, self._validated(replace(project, **fields)))

    def delete_project(self, projects: Iterable[Project], project_id: str) -> Tree:
        return tuple(p for p in projects if p.id != project_id)

    def set_notes(self, projects: Iterable[Project], project_id: str, notes: str) -> Tree:
        return self.update_project(projects, project_id, notes=notes or "")

    # ---- tasks ----
    def add_task(self, projects: Iterable[Project], project_id: str, text: str) -> Tree:
        text = (text or "").strip()
        if not text:
            raise ValueError("Task text cannot be empty.")
        projects = tuple(projects)
        project = find_project(projects, project_id)
        if project is None:
            return projects

        task = Task(id=self.id_factory(), text=text)
        return replace_project(projects, replace(project, tasks=project.tasks + (task,)))

    def rename_task(self, projects: Iterable[Project], project_id: str, task_id: str, text: str) -> Tree:
        text = (text or "").strip()
        if not text:
            raise ValueError("Task text cannot be empty.")
        return self._edit_task(projects, project_id, task_id, lambda t: replace(t, text=text))

    def toggle_task(self, projects: Iterable[Project], project_id: str, task_id: str) -> Tree:
        return self._edit_task(
            projects, project_id, task_id, lambda t: replace(t, completed=not t.completed)
        )

    def delete_task(self, projects: Iterable[Project], project_id: str, task_id: str) -> Tree:
        projects = tuple(projects)
        project = find_project(projects, project_id)
        if project is None:
            return projects
        tasks = tuple(t for t in project.tasks if t.id != task_id)
        return replace_project(projects, replace(project, tasks=tasks))

    # ---- internals ----
    def _edit_task(self, projects, project_id, task_id, fn) -> Tree:
        projects = tuple(projects)
        project = find_project(projects, project_id)
        task = project.find_task(task_id) if project else None
        if task is None:
            return projects
        return replace_project(projects, project.replace_task(fn(task)))

    def _validated(self, project: Project) -> Project:
        name = (project.name or "").strip()
        if not name:
            raise ValueError("Project name cannot be empty.")
        if project.status not in PROJECT_STATUSES:
            raise ValueError("Invalid status. Use " + "/".join(PROJECT_STATUSES) + ".")
        if project.priority not in PROJECT_PRIORITIES:
            raise ValueError("Invalid priority. Use " + "/".join(PROJECT_PRIORITIES) + ".")

        start = _parse_date(project.start_date)
        end = _parse_date(project.end_date)
        if start and end and start > end:
            raise ValueError("Start date must not be after end date.")

        # stored as yyyy-mm-dd whatever ISO form was typed
        return replace(
            project,
            name=name,
            start_date=start.isoformat() if start else None,
            end_date=end.isoformat() if end else None,
        )
