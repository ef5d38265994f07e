"""Stat card widget for the scan summary row."""

import customtkinter as ctk
from flbackupcleaner.gui import theme


class StatCard(ctk.CTkFrame):
    """A compact card showing a big value with a caption below it."""

    def __init__(self, parent, title: str, accent_color: str = theme.ACCENT, **kwargs):
        super().__init__(parent, fg_color=theme.BG_TERTIARY, corner_radius=10, **kwargs)

        ctk.CTkFrame(self, fg_color=accent_color, width=4, corner_radius=2).pack(
            side="left", fill="y", padx=(8, 0), pady=8
        )

        body = ctk.CTkFrame(self, fg_color="transparent")
        body.pack(side="left", fill="both", expand=True, padx=10, pady=8)

        self.value_label = ctk.CTkLabel(
            body,
            text="-",
            font=(theme.FONT_FAMILY, theme.FONT_SIZE_STAT, "bold"),
            text_color=theme.TEXT_PRIMARY,
            anchor="w",
        )
        self.value_label.pack(fill="x")

        ctk.CTkLabel(
            body,
            text=title,
            font=(theme.FONT_FAMILY, theme.FONT_SIZE_SMALL),
            text_color=theme.TEXT_MUTED,
            anchor="w",
        ).pack(fill="x")

    def set(self, value) -> None:
        self.value_label.configure(text=str(value))

    def reset(self) -> None:
        self.value_label.configure(text="-")
