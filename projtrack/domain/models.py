# -*- coding: utf-8 -*-

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Optional, Tuple

PROJECT_STATUSES = ("planning", "development", "paused", "completed")
PROJECT_PRIORITIES = ("high", "medium", "low")


@dataclass(frozen=True)
class TimeEntry:
    start: int  # epoch ms
    end: int
    duration: int  # ms, == end - start


@dataclass(frozen=True)
class Task:
    id: str
    text: str
    completed: bool = False
    time_entries: Tuple[TimeEntry, ...] = ()
    total_time: int = 0

    def with_entry(self, entry: TimeEntry) -> "Task":
        return replace(
            self,
            time_entries=self.time_entries + (entry,),
            total_time=self.total_time + entry.duration,
        )


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    status: str = "planning"
    priority: str = "medium"
    start_date: Optional[str] = None  # yyyy-mm-dd
    end_date: Optional[str] = None
    tasks: Tuple[Task, ...] = ()
    notes: str = ""
    created_at: int = 0

    def find_task(self, task_id: str) -> Optional[Task]:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    def replace_task(self, task: Task) -> "Project":
        return replace(
            self,
            tasks=tuple(task if t.id == task.id else t for t in self.tasks),
        )


def find_project(projects: Iterable[Project], project_id: str) -> Optional[Project]:
    for p in projects:
        if p.id == project_id:
            return p
    return None


def replace_project(projects: Iterable[Project], project: Project) -> Tuple[Project, ...]:
    return tuple(project if p.id == project.id else p for p in projects)


# ---- JSON codec ----
def time_entry_to_dict(entry: TimeEntry) -> Dict[str, Any]:
    return {"start": entry.start, "end": entry.end, "duration": entry.duration}


def task_to_dict(task: Task) -> Dict[str, Any]:
    return {
        "id": task.id,
        "text": task.text,
        "completed": task.completed,
        "timeEntries": [time_entry_to_dict(e) for e in task.time_entries],
        "totalTime": task.total_time,
    }


def project_to_dict(project: Project) -> Dict[str, Any]:
    return {
        "id": project.id,
        "name": project.name,
        "status": project.status,
        "priority": project.priority,
        "startDate": project.start_date,
        "endDate": project.end_date,
        "tasks": [task_to_dict(t) for t in project.tasks],
        "notes": project.notes,
        "createdAt": project.created_at,
    }


def time_entry_from_dict(d: Dict[str, Any]) -> TimeEntry:
    start = int(d.get("start") or 0)
    end = int(d.get("end") or start)
    duration = d.get("duration")
    return TimeEntry(
        start=start,
        end=end,
        duration=int(duration) if duration is not None else end - start,
    )


def task_from_dict(d: Dict[str, Any]) -> Task:
    entries = tuple(time_entry_from_dict(e) for e in (d.get("timeEntries") or []))
    total = d.get("totalTime")
    return Task(
        id=str(d.get("id", "")),
        text=str(d.get("text") or ""),
        completed=bool(d.get("completed", False)),
        time_entries=entries,
        total_time=int(total) if total is not None else sum(e.duration for e in entries),
    )


def project_from_dict(d: Dict[str, Any]) -> Project:
    status = d.get("status") or "planning"
    if status not in PROJECT_STATUSES:
        status = "planning"
    priority = d.get("priority") or "medium"
    if priority not in PROJECT_PRIORITIES:
        priority = "medium"

    return Project(
        id=str(d.get("id", "")),
        name=str(d.get("name") or ""),
        status=status,
        priority=priority,
        start_date=d.get("startDate") or None,
        end_date=d.get("endDate") or None,
        tasks=tuple(task_from_dict(t) for t in (d.get("tasks") or [])),
        notes=str(d.get("notes") or ""),
        created_at=int(d.get("createdAt") or 0),
    )


def projects_to_json(projects: Iterable[Project]) -> str:
    return json.dumps([project_to_dict(p) for p in projects], ensure_ascii=False)


def projects_from_json(text: str) -> Tuple[Project, ...]:
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("Stored projects must be a JSON array.")
    return tuple(project_from_dict(d) for d in data)
