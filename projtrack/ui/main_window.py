# -*- coding: utf-8 -*-

import logging
import tkinter as tk
from tkinter import messagebox, ttk
from typing import Dict, Optional

from tkinterweb import HtmlFrame

from projtrack.core.tick_scheduler import TickScheduler, TkAfterBackend
from projtrack.core.time_format import deadline_label, format_time
from projtrack.domain.models import PROJECT_PRIORITIES, PROJECT_STATUSES, Project
from projtrack.services.project_service import ProjectService
from projtrack.services.stats_service import StatsService
from projtrack.services.timer_service import TimerService
from projtrack.ui.markdown_renderer import MarkdownRenderer

logger = logging.getLogger(__name__)


class MainWindow:
    def __init__(
        self,
        timer_service: TimerService,
        project_service: ProjectService,
        stats_service: StatsService,
        tick_interval_ms: int = 1000,
    ):
        self.timer_service = timer_service
        self.project_service = project_service
        self.stats_service = stats_service
        self.renderer = MarkdownRenderer()

        self.root = tk.Tk()
        self.root.title("Projects + Time Tracker")
        self.root.geometry("1100x620")

        self.active_project_id: Optional[str] = None
        self._list_index_to_project_id: Dict[int, str] = {}
        self._notes_editing = False

        self._build_ui()

        self.ticker = TickScheduler(
            self.timer_service.registry,
            TkAfterBackend(self.root),
            on_tick=self._refresh_live_times,
            interval_ms=tick_interval_ms,
        )

        # wire callbacks from service -> window
        self.timer_service.set_on_change(lambda _tree: self._refresh_all())
        self.timer_service.set_on_state_change(self._refresh_live_times)

        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        self._refresh_all()

    def run(self):
        self.ticker.start()
        self.root.mainloop()

    def _on_close(self):
        self.ticker.stop()
        self.timer_service.shutdown()
        self.root.destroy()

    # ---------- UI ----------
    def _build_ui(self):
        outer = ttk.Frame(self.root, padding=10)
        outer.pack(fill="both", expand=True)
        outer.columnconfigure(0, weight=1)
        outer.columnconfigure(1, weight=3)
        outer.rowconfigure(1, weight=1)

        # dashboard row
        self.dashboard_var = tk.StringVar(value="")
        ttk.Label(outer, textvariable=self.dashboard_var, font=("Sans", 11, "bold")).grid(
            row=0, column=0, columnspan=2, sticky="w", pady=(0, 8)
        )

        # LEFT: projects
        left = ttk.Labelframe(outer, text="Projects", padding=10)
        left.grid(row=1, column=0, sticky="nsew", padx=(0, 10))
        left.columnconfigure(0, weight=1)
        left.rowconfigure(2, weight=1)

        add_row = ttk.Frame(left)
        add_row.grid(row=0, column=0, sticky="ew")
        add_row.columnconfigure(0, weight=1)
        self.new_project_var = tk.StringVar()
        entry = ttk.Entry(add_row, textvariable=self.new_project_var)
        entry.grid(row=0, column=0, sticky="ew")
        entry.bind("<Return>", lambda e: self._add_project())
        ttk.Button(add_row, text="Add", command=self._add_project).grid(
            row=0, column=1, padx=(6, 0)
        )

        self.err_var = tk.StringVar(value="")
        ttk.Label(left, textvariable=self.err_var, foreground="red").grid(
            row=1, column=0, sticky="w", pady=(6, 6)
        )

        self.project_list = tk.Listbox(left, height=16, exportselection=False)
        self.project_list.grid(row=2, column=0, sticky="nsew")
        self.project_list.bind("<<ListboxSelect>>", self._on_select_project)

        ttk.Button(left, text="Delete project", command=self._delete_project).grid(
            row=3, column=0, sticky="w", pady=(8, 0)
        )

        # RIGHT: details
        right = ttk.Frame(outer)
        right.grid(row=1, column=1, sticky="nsew")
        right.columnconfigure(0, weight=1)
        right.rowconfigure(1, weight=1)
        right.rowconfigure(2, weight=1)

        self._build_props(right)
        self._build_tasks(right)
        self._build_notes(right)

    def _build_props(self, parent):
        props = ttk.Labelframe(parent, text="Project", padding=8)
        props.grid(row=0, column=0, sticky="ew")

        self.name_var = tk.StringVar()
        self.status_var = tk.StringVar(value="planning")
        self.priority_var = tk.StringVar(value="medium")
        self.start_var = tk.StringVar()
        self.end_var = tk.StringVar()
        self.summary_var = tk.StringVar(value="")

        ttk.Label(props, text="Name").grid(row=0, column=0, sticky="w")
        ttk.Entry(props, textvariable=self.name_var, width=28).grid(row=0, column=1, sticky="w")
        ttk.Label(props, text="Status").grid(row=0, column=2, sticky="w", padx=(10, 0))
        ttk.Combobox(
            props, textvariable=self.status_var, values=PROJECT_STATUSES, state="readonly", width=12
        ).grid(row=0, column=3, sticky="w")
        ttk.Label(props, text="Priority").grid(row=0, column=4, sticky="w", padx=(10, 0))
        ttk.Combobox(
            props, textvariable=self.priority_var, values=PROJECT_PRIORITIES, state="readonly", width=8
        ).grid(row=0, column=5, sticky="w")

        ttk.Label(props, text="Start").grid(row=1, column=0, sticky="w", pady=(6, 0))
        ttk.Entry(props, textvariable=self.start_var, width=12).grid(row=1, column=1, sticky="w", pady=(6, 0))
        ttk.Label(props, text="End").grid(row=1, column=2, sticky="w", padx=(10, 0), pady=(6, 0))
        ttk.Entry(props, textvariable=self.end_var, width=12).grid(row=1, column=3, sticky="w", pady=(6, 0))
        ttk.Button(props, text="Save", command=self._save_props).grid(
            row=1, column=5, sticky="e", pady=(6, 0)
        )

        ttk.Label(props, textvariable=self.summary_var).grid(
            row=2, column=0, columnspan=6, sticky="w", pady=(6, 0)
        )

    def _build_tasks(self, parent):
        box = ttk.Labelframe(parent, text="Tasks", padding=8)
        box.grid(row=1, column=0, sticky="nsew", pady=(8, 0))
        box.columnconfigure(0, weight=1)
        box.rowconfigure(1, weight=1)

        add_row = ttk.Frame(box)
        add_row.grid(row=0, column=0, sticky="ew")
        add_row.columnconfigure(0, weight=1)
        self.new_task_var = tk.StringVar()
        entry = ttk.Entry(add_row, textvariable=self.new_task_var)
        entry.grid(row=0, column=0, sticky="ew")
        entry.bind("<Return>", lambda e: self._add_task())
        ttk.Button(add_row, text="Add task", command=self._add_task).grid(
            row=0, column=1, padx=(6, 0)
        )

        self.task_tree = ttk.Treeview(
            box, columns=("done", "task", "total", "live"), show="headings", height=8
        )
        for col, label, width in (
            ("done", "", 30),
            ("task", "Task", 320),
            ("total", "Total", 90),
            ("live", "Timer", 90),
        ):
            self.task_tree.heading(col, text=label)
            self.task_tree.column(col, width=width, stretch=(col == "task"))
        self.task_tree.grid(row=1, column=0, sticky="nsew", pady=(6, 0))
        self.task_tree.bind("<Double-1>", lambda e: self._toggle_timer())

        actions = ttk.Frame(box)
        actions.grid(row=2, column=0, sticky="ew", pady=(6, 0))
        ttk.Button(actions, text="Start / Stop", command=self._toggle_timer).pack(side="left")
        ttk.Button(actions, text="Done / Undo", command=self._toggle_done).pack(side="left", padx=(6, 0))
        ttk.Button(actions, text="Delete task", command=self._delete_task).pack(side="right")

    def _build_notes(self, parent):
        box = ttk.Labelframe(parent, text="Notes", padding=8)
        box.grid(row=2, column=0, sticky="nsew", pady=(8, 0))
        box.columnconfigure(0, weight=1)
        box.rowconfigure(1, weight=1)

        self.btn_edit_save = ttk.Button(box, text="Edit", command=self._toggle_notes_edit)
        self.btn_edit_save.grid(row=0, column=0, sticky="e")

        self.notes_host = ttk.Frame(box)
        self.notes_host.grid(row=1, column=0, sticky="nsew")
        self.md_view = HtmlFrame(self.notes_host, horizontal_scrollbar="auto")
        self.md_edit = tk.Text(self.notes_host, wrap="word", height=8)
        self.md_view.pack(fill="both", expand=True)

    # ---------- selection helpers ----------
    def _active_project(self) -> Optional[Project]:
        if not self.active_project_id:
            return None
        return self.timer_service.get_project(self.active_project_id)

    def _selected_task_id(self) -> Optional[str]:
        sel = self.task_tree.selection()
        return sel[0] if sel else None

    def _on_select_project(self, event=None):
        sel = self.project_list.curselection()
        if not sel:
            return
        self._close_notes_editor(save=True)
        self.active_project_id = self._list_index_to_project_id.get(int(sel[0]))
        self.err_var.set("")
        self._refresh_all()

    # ---------- actions ----------
    def _apply(self, fn, *args, **kwargs) -> bool:
        """Run a ProjectService edit against the current tree and store it."""
        try:
            new_tree = fn(self.timer_service.projects, *args, **kwargs)
        except ValueError as e:
            self.err_var.set(str(e))
            return False
        self.err_var.set("")
        self.timer_service.replace_projects(new_tree)
        return True

    def _add_project(self):
        if self._apply(self.project_service.create_project, self.new_project_var.get()):
            self.new_project_var.set("")
            self.active_project_id = self.timer_service.projects[-1].id
            self._refresh_all()

    def _delete_project(self):
        project = self._active_project()
        if project is None:
            return
        if not messagebox.askyesno("Delete project", f"Delete '{project.name}' and its tasks?"):
            return
        self.active_project_id = None
        self._apply(self.project_service.delete_project, project.id)

    def _save_props(self):
        project = self._active_project()
        if project is None:
            return
        self._apply(
            self.project_service.update_project,
            project.id,
            name=self.name_var.get(),
            status=self.status_var.get(),
            priority=self.priority_var.get(),
            start_date=self.start_var.get(),
            end_date=self.end_var.get(),
        )

    def _add_task(self):
        project = self._active_project()
        if project is None:
            self.err_var.set("Pick a project first.")
            return
        if self._apply(self.project_service.add_task, project.id, self.new_task_var.get()):
            self.new_task_var.set("")

    def _toggle_done(self):
        project, task_id = self._active_project(), self._selected_task_id()
        if project and task_id:
            self._apply(self.project_service.toggle_task, project.id, task_id)

    def _delete_task(self):
        project, task_id = self._active_project(), self._selected_task_id()
        if project and task_id:
            self._apply(self.project_service.delete_task, project.id, task_id)

    def _toggle_timer(self):
        project, task_id = self._active_project(), self._selected_task_id()
        if project and task_id:
            self.timer_service.toggle(project.id, task_id)

    # ---------- notes ----------
    def _toggle_notes_edit(self):
        if self._notes_editing:
            self._close_notes_editor(save=True)
            return
        project = self._active_project()
        if project is None:
            return
        self.md_edit.delete("1.0", tk.END)
        self.md_edit.insert("1.0", project.notes)
        self.md_view.pack_forget()
        self.md_edit.pack(fill="both", expand=True)
        self.btn_edit_save.config(text="Save")
        self._notes_editing = True

    def _close_notes_editor(self, save: bool):
        if not self._notes_editing:
            return
        self._notes_editing = False
        self.md_edit.pack_forget()
        self.md_view.pack(fill="both", expand=True)
        self.btn_edit_save.config(text="Edit")

        project = self._active_project()
        if save and project is not None:
            text = self.md_edit.get("1.0", "end-1c")
            if text != project.notes:
                self._apply(self.project_service.set_notes, project.id, text)
                return
        self._render_notes()

    def _render_notes(self):
        project = self._active_project()
        try:
            self.md_view.load_html(self.renderer.to_html(project.notes if project else ""))
        except Exception:
            logger.exception("notes preview failed")

    # ---------- refresh ----------
    def _refresh_all(self):
        projects = self.timer_service.projects

        self.project_list.delete(0, tk.END)
        self._list_index_to_project_id.clear()
        for idx, p in enumerate(projects):
            label = f"{p.name}  [{p.status}, {p.priority}]"
            self.project_list.insert(tk.END, label)
            self._list_index_to_project_id[idx] = p.id
            if p.id == self.active_project_id:
                self.project_list.selection_set(idx)

        if self._active_project() is None:
            self.active_project_id = None

        self._refresh_dashboard()
        self._refresh_details()

    def _refresh_dashboard(self):
        d = self.stats_service.dashboard(self.timer_service.projects)
        self.dashboard_var.set(
            f"Projects: {d.project_count}   "
            f"Tasks done: {d.completed_tasks}/{d.total_tasks}   "
            f"Time tracked: {format_time(d.total_time_ms)}"
        )

    def _refresh_details(self):
        project = self._active_project()
        selected = self._selected_task_id()
        self.task_tree.delete(*self.task_tree.get_children())

        if project is None:
            for var in (self.name_var, self.start_var, self.end_var, self.summary_var):
                var.set("")
            self._render_notes()
            return

        self.name_var.set(project.name)
        self.status_var.set(project.status)
        self.priority_var.set(project.priority)
        self.start_var.set(project.start_date or "")
        self.end_var.set(project.end_date or "")

        s = self.stats_service.project(project)
        parts = [f"{s.pending_tasks} pending of {s.task_count}", f"time {format_time(s.total_time_ms)}"]
        if s.progress is not None:
            parts.append(f"progress {s.progress}%")
        deadline = deadline_label(project.end_date)
        if deadline:
            parts.append(deadline)
        self.summary_var.set("   ".join(parts))

        for t in project.tasks:
            self.task_tree.insert(
                "",
                tk.END,
                iid=t.id,
                values=("✔" if t.completed else "", t.text, format_time(t.total_time), ""),
            )
        if selected and self.task_tree.exists(selected):
            self.task_tree.selection_set(selected)

        self._refresh_live_times()
        if not self._notes_editing:
            self._render_notes()

    def _refresh_live_times(self):
        project = self._active_project()
        if project is None:
            return
        for t in project.tasks:
            if not self.task_tree.exists(t.id):
                continue
            live = ""
            if self.timer_service.is_running(project.id, t.id):
                live = "▶ " + format_time(self.timer_service.elapsed(project.id, t.id))
            self.task_tree.set(t.id, "live", live)
