"""Backup Cleanup tab - scans drives for FL Studio backups and removes old ones."""

import customtkinter as ctk
from pathlib import Path
from tkinter import filedialog, messagebox

from flbackupcleaner.gui import theme
from flbackupcleaner.gui.widgets.stat_card import StatCard
from flbackupcleaner.cleanup.retention import clean_backups, summarize
from flbackupcleaner.core.models import EventKind, FoundBackups, RetentionResult, ScanConfig
from flbackupcleaner.scan.coordinator import ScanCoordinator
from flbackupcleaner.scan.drives import get_all_drives
from flbackupcleaner.utils.config import (
    DEFAULT_AUTO_CLEAN,
    DEFAULT_MAX_DEPTH,
    DEFAULT_SUB_WORKERS,
    POLL_INTERVAL_MS,
)
from flbackupcleaner.utils.file_utils import format_size


class ScanTab:
    """Root selection, scan progress, found backups and cleanup."""

    def __init__(self, parent: ctk.CTkFrame):
        self.parent = parent
        self.coordinator: ScanCoordinator | None = None
        self.found: FoundBackups = {}
        self.root_vars: dict[Path, ctk.BooleanVar] = {}
        self._build_ui()
        for drive in get_all_drives():
            self._add_root(drive, selected=True)

    def _build_ui(self):
        # Root selection
        self.roots_frame = ctk.CTkFrame(self.parent, fg_color="transparent")
        self.roots_frame.pack(fill="x", padx=15, pady=(15, 5))

        ctk.CTkLabel(
            self.roots_frame,
            text="Scan roots:",
            font=(theme.FONT_FAMILY, theme.FONT_SIZE_BODY),
        ).pack(side="left", padx=(0, 10))

        ctk.CTkButton(
            self.roots_frame,
            text="Folder...",
            width=90,
            command=self._browse,
            fg_color=theme.BG_TERTIARY,
            hover_color=theme.BG_HOVER,
        ).pack(side="right")

        # Settings
        settings_frame = ctk.CTkFrame(self.parent, fg_color="transparent")
        settings_frame.pack(fill="x", padx=15, pady=(5, 5))

        self.workers_var = ctk.StringVar(value=str(DEFAULT_SUB_WORKERS))
        self.depth_var = ctk.StringVar(value=str(DEFAULT_MAX_DEPTH))
        self.auto_clean_var = ctk.BooleanVar(value=DEFAULT_AUTO_CLEAN)

        for label, var in (("Workers per root:", self.workers_var), ("Max depth:", self.depth_var)):
            ctk.CTkLabel(
                settings_frame, text=label, font=(theme.FONT_FAMILY, theme.FONT_SIZE_BODY)
            ).pack(side="left", padx=(0, 5))
            ctk.CTkEntry(
                settings_frame, textvariable=var, width=50, fg_color=theme.BG_TERTIARY
            ).pack(side="left", padx=(0, 15))

        ctk.CTkSwitch(
            settings_frame,
            text="Clean automatically after scan",
            variable=self.auto_clean_var,
            progress_color=theme.ACCENT_DARK,
        ).pack(side="left")

        # Action buttons
        btn_frame = ctk.CTkFrame(self.parent, fg_color="transparent")
        btn_frame.pack(fill="x", padx=15, pady=(10, 5))

        self.scan_btn = ctk.CTkButton(
            btn_frame,
            text="Scan for Backups",
            command=self._scan,
            fg_color=theme.ACCENT_DARK,
            hover_color=theme.ACCENT,
            width=160,
        )
        self.scan_btn.pack(side="left", padx=(0, 10))

        self.stop_btn = ctk.CTkButton(
            btn_frame,
            text="Stop",
            command=self._stop,
            fg_color=theme.BG_TERTIARY,
            hover_color=theme.BG_HOVER,
            width=90,
            state="disabled",
        )
        self.stop_btn.pack(side="left", padx=(0, 10))

        self.clean_btn = ctk.CTkButton(
            btn_frame,
            text="Clean Old Backups (Keep Latest)",
            command=self._clean,
            fg_color=theme.BG_TERTIARY,
            hover_color=theme.ACCENT_WARNING,
            width=220,
            state="disabled",
        )
        self.clean_btn.pack(side="left")

        # Status / progress
        self.status_var = ctk.StringVar(value="Select roots and click 'Scan for Backups'")
        ctk.CTkLabel(
            self.parent,
            textvariable=self.status_var,
            font=(theme.FONT_FAMILY, theme.FONT_SIZE_SMALL),
            text_color=theme.TEXT_MUTED,
            anchor="w",
        ).pack(fill="x", padx=15, pady=(5, 5))

        self.progress = ctk.CTkProgressBar(
            self.parent, fg_color=theme.BG_TERTIARY, progress_color=theme.ACCENT
        )
        self.progress.set(0)
        self.progress.pack(fill="x", padx=15, pady=(0, 10))

        # Stat cards
        cards = ctk.CTkFrame(self.parent, fg_color="transparent")
        cards.pack(fill="x", padx=15, pady=(0, 5))
        self.projects_card = StatCard(cards, "Projects", theme.ACCENT)
        self.files_card = StatCard(cards, "Backup files", theme.ACCENT_INFO)
        self.redundant_card = StatCard(cards, "Reclaimable", theme.ACCENT_WARNING)
        for card in (self.projects_card, self.files_card, self.redundant_card):
            card.pack(side="left", fill="x", expand=True, padx=(0, 8))

        # Log area
        self.log_text = ctk.CTkTextbox(
            self.parent,
            font=(theme.FONT_MONO, theme.FONT_SIZE_MONO),
            fg_color=theme.BG_PRIMARY,
            text_color=theme.TEXT_SECONDARY,
        )
        self.log_text.pack(fill="both", expand=True, padx=15, pady=(5, 15))

    def _add_root(self, path: Path, selected: bool):
        if path in self.root_vars:
            self.root_vars[path].set(selected)
            return
        var = ctk.BooleanVar(value=selected)
        self.root_vars[path] = var
        ctk.CTkCheckBox(self.roots_frame, text=str(path), variable=var, width=60).pack(
            side="left", padx=(0, 8)
        )

    def _log(self, text: str):
        self.log_text.insert("end", text + "\n")
        self.log_text.see("end")

    def _clear_log(self):
        self.log_text.delete("1.0", "end")

    def _browse(self):
        folder = filedialog.askdirectory(title="Select a folder to scan")
        if folder:
            self._add_root(Path(folder), selected=True)

    # ── Scan ───────────────────────────────────────────────────────────────

    def _scan(self):
        if self.coordinator and self.coordinator.is_running:
            return

        roots = [path for path, var in self.root_vars.items() if var.get()]
        if not roots:
            messagebox.showwarning("Error", "Select at least one root to scan!")
            return

        try:
            config = ScanConfig.from_settings(
                roots, self.workers_var.get(), self.depth_var.get(), self.auto_clean_var.get()
            )
        except ValueError as e:
            messagebox.showerror("Error", f"Invalid settings:\n{e}")
            return

        self._clear_log()
        self.found = {}
        for card in (self.projects_card, self.files_card, self.redundant_card):
            card.reset()
        self.progress.set(0)
        self.status_var.set("Starting scan...")
        self.scan_btn.configure(state="disabled")
        self.stop_btn.configure(state="normal")
        self.clean_btn.configure(state="disabled")

        available = list(self.root_vars)
        self.coordinator = ScanCoordinator(config, enumerate_roots=lambda: available)
        self.coordinator.start()
        self.parent.after(POLL_INTERVAL_MS, self._poll)

    def _stop(self):
        if self.coordinator:
            self.coordinator.cancel()
            self.status_var.set("Stopping...")
            self.stop_btn.configure(state="disabled")

    def _poll(self):
        """Drain every pending scan event, then reschedule while the scan runs."""
        if self.coordinator is None:
            return

        running = self.coordinator.is_running
        for event in self.coordinator.channel.drain():
            if event.kind is EventKind.PROGRESS:
                self.status_var.set(event.message)
                self.progress.set(max(self.progress.get(), event.percent / 100))
            elif event.kind is EventKind.FOUND_BACKUP:
                self.found.setdefault(event.project_key, []).append(event.backup)
                self.files_card.set(sum(len(b) for b in self.found.values()))
                self.projects_card.set(len(self.found))
            elif event.kind is EventKind.WARNING:
                self._log(f"WARNING: {event.message}")
            elif event.kind is EventKind.COMPLETE:
                self.progress.set(1)
                if self.coordinator.auto_clean_pending:
                    # result.found is still being cleaned; show the streamed matches
                    self._show_found(event.total_found, allow_clean=False)
                else:
                    self.found = self.coordinator.result.found
                    self._show_found(event.total_found)
            elif event.kind is EventKind.AUTO_CLEAN_REQUESTED:
                self.status_var.set("Cleaning backup files...")
            elif event.kind is EventKind.CLEANUP_FINISHED:
                self.found = self.coordinator.result.found
                self._show_cleanup(event.result)

        if running:
            self.parent.after(POLL_INTERVAL_MS, self._poll)
        else:
            self.scan_btn.configure(state="normal")
            self.stop_btn.configure(state="disabled")

    def _show_found(self, total_found: int, allow_clean: bool = True):
        summary = summarize(self.found)
        self.projects_card.set(summary.projects)
        self.files_card.set(summary.total_files)
        self.redundant_card.set(format_size(summary.redundant_bytes))

        if not self.found:
            self._log("No FL Studio backup files found.")
            self.status_var.set("Scan complete! No backup files found.")
            return

        self.status_var.set(
            f"Scan complete! Found {total_found} backup files in {summary.projects} projects "
            f"({summary.projects_with_multiple} with multiple backups)"
        )
        for key, backups in sorted(self.found.items(), key=lambda kv: str(kv[0])):
            self._log(f"Project: {key.project_name}")
            self._log(f"  Path: {key.project_folder}")
            self._log(f"  Backups: {len(backups)}")
            for backup in backups:
                self._log(f"    └─ {backup.timestamp} ({backup.file_size / 1024:.1f} KB)")
        if allow_clean and summary.projects_with_multiple:
            self.clean_btn.configure(state="normal")

    # ── Cleanup ────────────────────────────────────────────────────────────

    def _clean(self):
        if self.coordinator and self.coordinator.is_running:
            return
        summary = summarize(self.found)
        if not summary.redundant_files:
            return

        if not messagebox.askyesno(
            "Delete old backups",
            f"Delete {summary.redundant_files} old backup files "
            f"({format_size(summary.redundant_bytes)})?\n\n"
            f"The latest backup of every project is kept.",
            icon="warning",
        ):
            return

        self.status_var.set("Cleaning backup files...")
        self._show_cleanup(clean_backups(self.found))

    def _show_cleanup(self, result: RetentionResult):
        for failure in result.failures:
            self._log(f"Failed to delete {failure.path}: {failure.reason}")
        self._log(f"\nDeleted {result.deleted_count} files, saved {result.reclaimed_mb:.2f} MB")
        self.redundant_card.set(format_size(summarize(self.found).redundant_bytes))
        self.clean_btn.configure(state="disabled")
        self.status_var.set(
            f"Cleanup complete! Deleted {result.deleted_count} files, "
            f"saved {result.reclaimed_mb:.2f} MB"
        )
