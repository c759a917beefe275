from __future__ import annotations

import string
from typing import Dict, Iterable, Optional

import streamlit as st

PALETTES: Dict[str, Dict[str, str]] = {
    "light": {
        "PRIMARY": "#2563eb",
        "SURFACE": "#f8fafc",
        "SURFACE_ALT": "#ffffff",
        "TEXT": "#0f172a",
        "MUTED": "#64748b",
        "SUCCESS": "#16a34a",
        "WARNING": "#d97706",
        "ERROR": "#dc2626",
    },
    "dark": {
        "PRIMARY": "#5ab0ff",
        "SURFACE": "#0b1220",
        "SURFACE_ALT": "#111827",
        "TEXT": "#e5e7eb",
        "MUTED": "#9ca3af",
        "SUCCESS": "#22c55e",
        "WARNING": "#f59e0b",
        "ERROR": "#ef4444",
    },
}

CONCEALED = "•••"

TONE_COLORS = {"high": PALETTES["light"]["SUCCESS"], "medium": PALETTES["light"]["WARNING"], "low": PALETTES["light"]["ERROR"]}

CSS_TEMPLATE = """
<style>
$SURFACE_RULE
:root {
    --primary: $PRIMARY;
    --surface: $SURFACE;
    --surface-alt: $SURFACE_ALT;
    --text: $TEXT;
    --muted: $MUTED;
    --radius-md: 12px;
}

section.main .block-container { padding: 1.2rem 2rem 2rem 2rem; max-width: 1300px; }

.app-badge {
    display: inline-flex;
    align-items: center;
    padding: 0.2rem 0.55rem;
    border-radius: 999px;
    font-size: 0.72rem;
    font-weight: 600;
    border: 1px solid currentColor;
}
.app-badge.ok { color: $SUCCESS; }
.app-badge.bad { color: $ERROR; }
.app-badge.info { color: $PRIMARY; }

.app-kpi {
    background: var(--surface-alt);
    border: 1px solid rgba(127,127,127,0.2);
    border-radius: var(--radius-md);
    padding: 0.8rem 1rem;
}
.app-kpi .label { color: $MUTED; font-size: 0.8rem; margin-bottom: 0.2rem; }
.app-kpi .value { font-size: 1.35rem; font-weight: 700; }

.small-muted { color: var(--muted); font-size: 0.85rem; }
.section-header { font-weight: 700; font-size: 1.05rem; margin: 0.6rem 0 0.3rem 0; }
</style>
"""


SURFACE_RULE = """
html, body, [class^="css"], .stApp {
    background: var(--surface);
    color: var(--text);
}
"""


def _css_for(theme: str) -> str:
    palette = dict(PALETTES["dark" if theme == "dark" else "light"])
    # "system" keeps Streamlit's own page colors and only styles components.
    palette["SURFACE_RULE"] = SURFACE_RULE if theme in PALETTES else ""
    return string.Template(CSS_TEMPLATE).safe_substitute(palette)


def conceal(text: str, show: bool) -> str:
    return text if show else CONCEALED


def muted(text: str):
    st.markdown(f"<div class='small-muted'>{text}</div>", unsafe_allow_html=True)


def badge(label: str, tone: str = "info"):
    st.markdown(f"<span class='app-badge {tone}'>{label}</span>", unsafe_allow_html=True)


def kpi_row(items: Iterable[dict]):
    items = list(items)
    cols = st.columns(len(items)) if items else []
    for col, item in zip(cols, items):
        with col:
            st.markdown(
                f"""
                <div class='app-kpi'>
                    <div class='label'>{item.get('label','')}</div>
                    <div class='value'>{item.get('value','-')}</div>
                </div>
                """,
                unsafe_allow_html=True,
            )


def section_header(title: str, description: Optional[str] = None):
    st.markdown(f"<div class='section-header'>{title}</div>", unsafe_allow_html=True)
    if description:
        muted(description)


class AppShell:
    def __init__(self, title: str, theme: str = "system"):
        self.title = title
        self.theme = theme
        st.markdown(_css_for(theme), unsafe_allow_html=True)

    def header(self, subtitle: Optional[str] = None):
        st.title(self.title)
        if subtitle:
            muted(subtitle)
