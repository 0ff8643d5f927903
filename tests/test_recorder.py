from __future__ import annotations

import unittest

from projtrack.domain.models import TimeEntry, find_project
from projtrack.services.recorder import TimeEntryRecorder
from tests.helpers import sample_projects


class TestTimeEntryRecorder(unittest.TestCase):
    def setUp(self) -> None:
        self.recorder = TimeEntryRecorder()
        self.tree = sample_projects()

    def test_commit_appends_entry_and_total(self) -> None:
        tree = self.recorder.commit(self.tree, "p1", "t2", 0, 5_000)
        assert tree is not None
        task = find_project(tree, "p1").find_task("t2")
        self.assertEqual((TimeEntry(start=0, end=5_000, duration=5_000),), task.time_entries)
        self.assertEqual(5_000, task.total_time)

    def test_commit_is_copy_on_write(self) -> None:
        tree = self.recorder.commit(self.tree, "p1", "t2", 0, 5_000)
        self.assertEqual((), find_project(self.tree, "p1").find_task("t2").time_entries)
        assert tree is not None
        # untouched projects are shared
        self.assertIs(self.tree[1], tree[1])

    def test_total_matches_entries_after_many_commits(self) -> None:
        tree = self.tree
        for start, elapsed in ((0, 1_200), (10_000, 800), (20_000, 61_000)):
            tree = self.recorder.commit(tree, "p1", "t1", start, elapsed)
        task = find_project(tree, "p1").find_task("t1")
        self.assertEqual(63_000, task.total_time)
        self.assertEqual(task.total_time, sum(e.duration for e in task.time_entries))
        self.assertTrue(all(e.end - e.start == e.duration for e in task.time_entries))

    def test_missing_target_is_dropped(self) -> None:
        with self.assertLogs("projtrack.services.recorder", level="INFO"):
            self.assertIsNone(self.recorder.commit(self.tree, "p1", "gone", 0, 1_000))
        self.assertIsNone(self.recorder.commit(self.tree, "gone", "t1", 0, 1_000))

    def test_on_commit_sees_each_recorded_entry(self) -> None:
        seen = []
        recorder = TimeEntryRecorder(on_commit=lambda *args: seen.append(args))
        recorder.commit(self.tree, "p1", "t2", 100, 2_000)
        recorder.commit(self.tree, "p1", "gone", 0, 1_000)
        self.assertEqual([("p1", "t2", TimeEntry(start=100, end=2_100, duration=2_000))], seen)


if __name__ == "__main__":
    unittest.main()
