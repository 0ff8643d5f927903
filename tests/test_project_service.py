from __future__ import annotations

import unittest

from projtrack.domain.models import find_project
from projtrack.services.project_service import ProjectService
from tests.helpers import FakeClock, sample_projects


class TestProjectService(unittest.TestCase):
    def setUp(self) -> None:
        ids = iter(f"id{i}" for i in range(100))
        self.svc = ProjectService(clock=FakeClock(42), id_factory=lambda: next(ids))

    def test_create_project(self) -> None:
        tree = self.svc.create_project((), "  Book  ", priority="high", end_date="2026-12-01")
        self.assertEqual(1, len(tree))
        p = tree[0]
        self.assertEqual(("id0", "Book", "planning", "high", 42), (p.id, p.name, p.status, p.priority, p.created_at))
        self.assertEqual("2026-12-01", p.end_date)
        self.assertIsNone(p.start_date)

    def test_create_validates(self) -> None:
        for kwargs in (
            {"name": "  "},
            {"name": "x", "status": "done"},
            {"name": "x", "priority": "urgent"},
            {"name": "x", "start_date": "01/02/2026"},
            {"name": "x", "start_date": "2026-05-02", "end_date": "2026-05-01"},
        ):
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValueError):
                    self.svc.create_project((), **kwargs)

    def test_compact_iso_dates_are_stored_normalized(self) -> None:
        tree = self.svc.create_project((), "x", start_date="20260101")
        self.assertEqual("2026-01-01", tree[0].start_date)

        tree = self.svc.create_project((), "x", start_date="20260101", end_date="2026-03-01")
        self.assertEqual(("2026-01-01", "2026-03-01"), (tree[0].start_date, tree[0].end_date))

        with self.assertRaises(ValueError):
            self.svc.create_project((), "x", start_date="20260302", end_date="2026-03-01")

    def test_update_project(self) -> None:
        tree = self.svc.update_project(sample_projects(), "p2", status="paused", start_date="")
        self.assertEqual("paused", find_project(tree, "p2").status)
        with self.assertRaises(ValueError):
            self.svc.update_project(tree, "p2", tasks=())

    def test_unknown_ids_are_noops(self) -> None:
        tree = sample_projects()
        self.assertEqual(tree, self.svc.update_project(tree, "nope", name="x"))
        self.assertEqual(tree, self.svc.add_task(tree, "nope", "x"))
        self.assertEqual(tree, self.svc.toggle_task(tree, "p1", "nope"))
        self.assertEqual(tree, self.svc.delete_task(tree, "nope", "t1"))
        self.assertEqual(tree, self.svc.delete_project(tree, "nope"))

    def test_task_lifecycle(self) -> None:
        tree = self.svc.add_task(sample_projects(), "p2", " Plant tomatoes ")
        task = find_project(tree, "p2").tasks[-1]
        self.assertEqual(("id0", "Plant tomatoes", False, 0), (task.id, task.text, task.completed, task.total_time))

        tree = self.svc.toggle_task(tree, "p2", "id0")
        self.assertTrue(find_project(tree, "p2").find_task("id0").completed)

        tree = self.svc.rename_task(tree, "p2", "id0", "Plant peppers")
        self.assertEqual("Plant peppers", find_project(tree, "p2").find_task("id0").text)

        tree = self.svc.delete_task(tree, "p2", "id0")
        self.assertEqual((), find_project(tree, "p2").tasks)

    def test_empty_task_text_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.svc.add_task(sample_projects(), "p1", "   ")

    def test_delete_project_and_notes(self) -> None:
        tree = self.svc.set_notes(sample_projects(), "p2", "# Plan")
        self.assertEqual("# Plan", find_project(tree, "p2").notes)
        tree = self.svc.delete_project(tree, "p1")
        self.assertEqual(["p2"], [p.id for p in tree])


if __name__ == "__main__":
    unittest.main()
