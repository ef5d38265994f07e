"""Main application window."""

import ctypes
import customtkinter as ctk

from flbackupcleaner.gui import theme
from flbackupcleaner.gui.tab_scan import ScanTab
from flbackupcleaner.utils.config import (
    APP_NAME,
    APP_VERSION,
    WINDOW_HEIGHT,
    WINDOW_MIN_HEIGHT,
    WINDOW_MIN_WIDTH,
    WINDOW_WIDTH,
)


class FlBackupCleanerApp:
    """Main application class."""

    def __init__(self):
        self._set_dpi_awareness()

        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("dark-blue")

        self.root = ctk.CTk()
        self.root.title(f"{APP_NAME} v{APP_VERSION}")
        self.root.geometry(f"{WINDOW_WIDTH}x{WINDOW_HEIGHT}")
        self.root.minsize(WINDOW_MIN_WIDTH, WINDOW_MIN_HEIGHT)
        self.root.configure(fg_color=theme.BG_PRIMARY)

        self._build_ui()

    def _set_dpi_awareness(self):
        # Only available on Windows
        windll = getattr(ctypes, "windll", None)
        if windll is None:
            return
        try:
            windll.shcore.SetProcessDpiAwareness(2)
        except (AttributeError, OSError):
            try:
                windll.user32.SetProcessDPIAware()
            except (AttributeError, OSError):
                pass

    def _build_ui(self):
        title_frame = ctk.CTkFrame(self.root, fg_color=theme.BG_PRIMARY)
        title_frame.pack(fill="x", padx=20, pady=(15, 5))

        ctk.CTkLabel(
            title_frame,
            text=APP_NAME,
            font=(theme.FONT_FAMILY, theme.FONT_SIZE_TITLE, "bold"),
            text_color=theme.ACCENT,
        ).pack(side="left")

        ctk.CTkLabel(
            title_frame,
            text=f"v{APP_VERSION}",
            font=(theme.FONT_FAMILY, theme.FONT_SIZE_SMALL),
            text_color=theme.TEXT_MUTED,
        ).pack(side="left", padx=(10, 0), pady=(8, 0))

        ctk.CTkLabel(
            self.root,
            text="Scans your drives for FL Studio 'Backup' folders and removes old autosaves, "
                 "keeping only the latest backup of each project.",
            font=(theme.FONT_FAMILY, theme.FONT_SIZE_SMALL),
            text_color=theme.TEXT_SECONDARY,
            anchor="w",
        ).pack(fill="x", padx=20)

        body = ctk.CTkFrame(self.root, fg_color=theme.BG_SECONDARY)
        body.pack(fill="both", expand=True, padx=15, pady=(5, 15))

        self.scan_tab = ScanTab(body)

    def run(self):
        self.root.mainloop()
