# -*- coding: utf-8 -*-

import logging
from typing import Callable, Iterable, Optional, Tuple

from projtrack.domain.models import Project, TimeEntry, find_project, replace_project

logger = logging.getLogger(__name__)


class TimeEntryRecorder:
    """
    Turns a finished run into a TimeEntry on its task.
    Returns a new tree; the caller owns saving it.
    on_commit(project_id, task_id, entry) runs after each recorded entry.
    """

    def __init__(self, on_commit: Optional[Callable[[str, str, TimeEntry], None]] = None):
        self.on_commit = on_commit

    def build_entry(self, started_at: int, elapsed: int) -> TimeEntry:
        elapsed = max(0, int(elapsed))
        return TimeEntry(start=started_at, end=started_at + elapsed, duration=elapsed)

    def commit(
        self,
        projects: Iterable[Project],
        project_id: str,
        task_id: str,
        started_at: int,
        elapsed: int,
    ) -> Optional[Tuple[Project, ...]]:
        projects = tuple(projects)

        project = find_project(projects, project_id)
        task = project.find_task(task_id) if project else None
        if project is None or task is None:
            # target deleted while the timer ran; the run is lost
            logger.info(
                "dropping %d ms for missing task %s/%s", elapsed, project_id, task_id
            )
            return None

        entry = self.build_entry(started_at, elapsed)
        new_tree = replace_project(projects, project.replace_task(task.with_entry(entry)))
        if self.on_commit:
            self.on_commit(project_id, task_id, entry)
        return new_tree
