"""Streamlit viewer for a gradebook CSV export.

All parsing and grade math lives in ``src/gradebook_viewer``; this module only
renders what the core computes and owns the persisted display preferences.
Consultation mode conceals every score and locks the student selection so
an advisor can go through one student's grades with them present.
"""

import sys
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd
import streamlit as st

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for path in (ROOT, SRC):
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from app.sample_data import load_sample_text  # noqa: E402
from app.ui import TONE_COLORS, AppShell, badge, conceal, kpi_row, muted, section_header  # noqa: E402
from gradebook_viewer import invariants, metrics, plots  # noqa: E402
from gradebook_viewer.aggregation import FINAL_SCORE_COLUMNS, StudentBreakdown, compute_breakdown  # noqa: E402
from gradebook_viewer.config import THEMES, DisplayPreferences, JsonPreferenceStore, ViewerConfig  # noqa: E402
from gradebook_viewer.index import FINAL_GRADE_COLUMNS, StudentIndexItem, build_student_index, filter_index, find_by_student_id, is_failing  # noqa: E402
from gradebook_viewer.io import fetch_text  # noqa: E402
from gradebook_viewer.logging_setup import configure_logging  # noqa: E402
from gradebook_viewer.numeric import first_present  # noqa: E402
from gradebook_viewer.roster import Roster  # noqa: E402
from gradebook_viewer.session import GradebookLoader, LoadState, LoadStatus  # noqa: E402

st.set_page_config(page_title="Gradebook Viewer", layout="wide", page_icon="📒")

DATA_DIR = ROOT / "data"
PREFERENCES_PATH = DATA_DIR / "preferences.json"
SAMPLE_SOURCE = "sample"


def _fmt_pct(value: Optional[float], show: bool) -> str:
    return conceal(f"{value:.1f}%" if value is not None else "—", show)


def _init_state() -> None:
    if "config" not in st.session_state:
        try:
            config = ViewerConfig.from_env()
        except ValueError as exc:
            st.error(f"Invalid configuration: {exc}")
            st.stop()
        configure_logging(config.log_level)
        st.session_state["config"] = config

    if "prefs" not in st.session_state:
        st.session_state["prefs"] = DisplayPreferences.from_store(JsonPreferenceStore(PREFERENCES_PATH))

    defaults = {"consultation": False, "query": "", "active_key": None}
    for key, val in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = val


def _load_state(config: ViewerConfig) -> LoadState:
    """Run the one load of this session; reruns reuse the finished loader."""
    loader: Optional[GradebookLoader] = st.session_state.get("loader")
    if loader is None:
        if config.source:
            loader = GradebookLoader(config.source, fetch=fetch_text)
        else:
            loader = GradebookLoader(SAMPLE_SOURCE, fetch=lambda _: load_sample_text())
        st.session_state["loader"] = loader
        with st.spinner("Loading gradebook..."):
            loader.run()
    return loader.state


def _save_prefs(prefs: DisplayPreferences) -> None:
    st.session_state["prefs"] = prefs
    prefs.save(JsonPreferenceStore(PREFERENCES_PATH))


def _preference_controls(prefs: DisplayPreferences, consultation: bool) -> DisplayPreferences:
    theme = st.sidebar.selectbox("Theme", options=list(THEMES), index=list(THEMES).index(prefs.theme), format_func=str.title)
    collapsed = st.sidebar.toggle("Compact list", value=prefs.collapsed)
    show_status = st.sidebar.toggle("Show passed/failed", value=prefs.show_status)
    show_scores = st.sidebar.toggle("Show scores", value=prefs.show_scores, disabled=consultation)

    updated = DisplayPreferences(show_scores=show_scores, show_status=show_status, collapsed=collapsed, theme=theme)
    if updated != prefs:
        _save_prefs(updated)
    return updated


def _item_label(item: StudentIndexItem, prefs: DisplayPreferences, roster: Roster) -> str:
    record = roster.records[item.row_index]
    if prefs.collapsed:
        initials = f"{record.last_name[:1]}{record.first_name[:1]}".upper()
        return initials or "??"
    label = item.display_name
    if prefs.show_status and item.final_grade is not None:
        label += "  ✖ Failed" if item.failed else "  ✔ Passed"
    if record.sis_id:
        label += f"  ·  {record.sis_id}"
    return label


def _student_selector(index: Sequence[StudentIndexItem], roster: Roster, prefs: DisplayPreferences, consultation: bool) -> Optional[StudentIndexItem]:
    query = st.sidebar.text_input("Search by name or ID...", value=st.session_state["query"], disabled=consultation)
    st.session_state["query"] = query
    visible = filter_index(index, query)

    active_key = st.session_state.get("active_key")
    if active_key is None:
        linked = find_by_student_id(index, st.query_params.get("student", ""))
        active_key = linked.key if linked else (index[0].key if index else None)

    if not visible:
        st.sidebar.caption("No matches")
        return next((item for item in index if item.key == active_key), None)

    keys = [item.key for item in visible]
    by_key = {item.key: item for item in index}
    choice = st.sidebar.radio(
        "Students",
        options=keys,
        index=keys.index(active_key) if active_key in keys else 0,
        format_func=lambda key: _item_label(by_key[key], prefs, roster),
        disabled=consultation,
        label_visibility="collapsed",
    )
    if consultation and active_key is not None:
        # Selection is locked while consulting.
        choice = active_key

    st.session_state["active_key"] = choice
    selected = by_key.get(choice)
    if selected is not None:
        sis_id = roster.records[selected.row_index].sis_id
        if sis_id:
            st.query_params["student"] = sis_id
    return selected


def _render_contributions(breakdown: StudentBreakdown, show: bool) -> None:
    section_header("Category contributions")
    frame = metrics.contributions_frame(breakdown)
    table = pd.DataFrame(
        {
            "Category": frame["category"],
            "Weight": frame["weight"].map(lambda w: f"{w:.0f}%"),
            "Contrib": [_fmt_pct(row.contribution, show) for row in breakdown.contributions],
        }
    )
    st.dataframe(table, hide_index=True, use_container_width=True)
    st.markdown(f"**Sum:** {_fmt_pct(breakdown.displayed_sum, show)}")
    if breakdown.final_score is not None and not breakdown.reconciled:
        muted("No category has a score yet; showing the computed sum instead of the final score.")


def _render_groups(breakdown: StudentBreakdown, show: bool) -> None:
    items = metrics.items_frame(breakdown)
    for group in breakdown.groups:
        if not group.items:
            continue
        contribution = breakdown.contribution(group.category_id)
        label = f"{group.name} · {group.weight:.0f}%" if contribution is not None else group.name
        summary = f"avg {_fmt_pct(group.totals.pct, show)}"
        if contribution is not None:
            summary += f" · contrib {_fmt_pct(contribution.contribution, show)}"
        with st.expander(f"{label}  ({summary})", expanded=False):
            rows = items[items["category_id"] == group.category_id]
            table = pd.DataFrame(
                {
                    "Activity": rows["activity"],
                    "Score": [conceal(value, show) for value in rows["score"]],
                    "Max": [conceal(f"{value:.2f}" if pd.notna(value) else "—", show) for value in rows["max"]],
                    "%": [_fmt_pct(value if pd.notna(value) else None, show) for value in rows["pct"]],
                }
            )
            if show:
                colors = [f"color: {TONE_COLORS[tone]}" if tone in TONE_COLORS else "" for tone in rows["tone"]]
                table = table.style.apply(lambda _: colors, subset=["%"])
            st.dataframe(table, hide_index=True, use_container_width=True)


def _render_student(breakdown: StudentBreakdown, show: bool) -> None:
    record = breakdown.record
    st.header(record.display_name)

    current = first_present(record.values, ["Unposted Current Score", "Current Score"])
    final = first_present(record.values, FINAL_SCORE_COLUMNS)
    grade = first_present(record.values, FINAL_GRADE_COLUMNS)
    kpi_row(
        [
            {"label": "SIS User ID", "value": record.sis_id or "—"},
            {"label": "Section", "value": record.section or "—"},
            {"label": "Current Score", "value": conceal(current or "—", show)},
            {"label": "Final Score", "value": conceal(final or "—", show)},
        ]
    )
    if grade and show:
        badge(f"Final Grade {grade}", "bad" if is_failing(record) else "ok")

    left, right = st.columns([1, 1])
    with left:
        _render_contributions(breakdown, show)
    with right:
        if show:
            st.plotly_chart(plots.contribution_bar(metrics.contributions_frame(breakdown)), use_container_width=True)
            st.plotly_chart(plots.category_pct_bar(metrics.totals_frame(breakdown)), use_container_width=True)
        else:
            muted("Charts are hidden while scores are concealed.")

    _render_groups(breakdown, show)


def _render_diagnostics(roster: Roster, index: Sequence[StudentIndexItem]) -> None:
    with st.expander("Load diagnostics", expanded=False):
        summary = metrics.roster_summary(roster, index)
        kpi_row([{"label": key.title(), "value": value} for key, value in summary.items()])
        results = invariants.run_invariants(roster)
        st.dataframe(pd.DataFrame(results), hide_index=True, use_container_width=True)
        st.dataframe(metrics.section_summary(roster), hide_index=True, use_container_width=True)


def main():
    _init_state()
    config: ViewerConfig = st.session_state["config"]
    prefs: DisplayPreferences = st.session_state["prefs"]

    shell = AppShell("Gradebook Viewer", theme=prefs.theme)

    consultation = st.sidebar.toggle("Consultation mode", value=st.session_state["consultation"], help="Hide every score and lock the student list")
    st.session_state["consultation"] = consultation
    prefs = _preference_controls(prefs, consultation)
    show = prefs.show_scores and not consultation

    state = _load_state(config)
    if state.status is LoadStatus.LOADING:
        st.info("Loading gradebook...")
        return
    if state.status is LoadStatus.ERROR:
        st.error(f"Error: {state.message}")
        return

    roster = state.roster
    index = build_student_index(roster)
    shell.header(subtitle=f"{len(index)} students · source: {config.source or 'bundled sample'}")

    selected = _student_selector(index, roster, prefs, consultation)
    if selected is None:
        st.info("No students in this gradebook.")
        return

    breakdown = compute_breakdown(roster.records[selected.row_index], roster, config.categories, config.reconciler)
    _render_student(breakdown, show)

    if not consultation:
        _render_diagnostics(roster, index)


if __name__ == "__main__":
    main()
