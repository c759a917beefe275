import plotly.express as px
import plotly.graph_objects as go
import pandas as pd


def contribution_bar(contrib_df: pd.DataFrame) -> go.Figure:
    data = contrib_df.dropna(subset=["contribution"]) if not contrib_df.empty else contrib_df
    if data.empty:
        return go.Figure()
    fig = px.bar(
        data,
        x="category",
        y="contribution",
        title="Contribution to final score",
        labels={"category": "Category", "contribution": "Points of final %"},
    )
    fig.update_layout(bargap=0.25)
    return fig


def category_pct_bar(totals_df: pd.DataFrame) -> go.Figure:
    data = totals_df.dropna(subset=["pct"]) if not totals_df.empty else totals_df
    if data.empty:
        return go.Figure()
    fig = px.bar(data, x="category", y="pct", title="Category averages", labels={"category": "Category", "pct": "Average %"})
    fig.update_layout(yaxis_range=[0, max(100.0, float(data["pct"].max()))])
    return fig
