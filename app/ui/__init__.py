from .shell import TONE_COLORS, AppShell, badge, conceal, kpi_row, muted, section_header

__all__ = ["TONE_COLORS", "AppShell", "badge", "conceal", "kpi_row", "muted", "section_header"]
