"""
XSMB Lô Predictor -- Streamlit Web Application

Paste or upload an XSMB "lô tô" history, then browse statistics, generate a
16-number prediction for the next draw and run a walk-forward backtest.
Heavy work runs on the PipelineWorker background thread.
"""
import os
import sys
import warnings

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
warnings.filterwarnings("ignore")

from xsmb_predictor.analysis import HistoryAnalyzer
from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import ALL_NUMBERS, ZONES
from xsmb_predictor.parser import DEFAULT_DATA_PATH, history_to_frame, load_raw_file
from xsmb_predictor.strategies import DEFAULT_STRATEGIES
from xsmb_predictor.worker import PipelineWorker, prepare

WEEKDAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# -- Page Config ----------------------------------------------------------

st.set_page_config(
    page_title="XSMB Lô Predictor",
    page_icon="🎱",
    layout="wide",
    initial_sidebar_state="expanded",
)

# -- Custom CSS -----------------------------------------------------------

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: 700;
        text-align: center;
        padding: 1rem 0;
        background: linear-gradient(90deg, #FF6B6B, #FFE66D, #4ECDC4);
        -webkit-background-clip: text;
        -webkit-text-fill-color: transparent;
    }
    .board-card {
        background: linear-gradient(135deg, #1A1F2E, #2D3548);
        border-radius: 16px;
        padding: 1.5rem;
        margin: 0.5rem 0;
        border: 1px solid #3D4663;
    }
    .number-ball {
        display: inline-block;
        width: 48px;
        height: 48px;
        border-radius: 50%;
        text-align: center;
        line-height: 48px;
        font-size: 1.2rem;
        font-weight: 700;
        margin: 4px;
        color: white;
    }
    .ball-main { background: linear-gradient(135deg, #FF6B6B, #EE5A24); }
    .ball-hit { background: linear-gradient(135deg, #4ECDC4, #2ECC71); }
    .disclaimer {
        background: #2D1B1B;
        border: 1px solid #FF6B6B;
        border-radius: 8px;
        padding: 1rem;
        margin: 1rem 0;
        font-size: 0.9rem;
    }
</style>
""", unsafe_allow_html=True)


def render_balls(numbers, hits=()):
    html = "".join(
        f'<span class="number-ball {"ball-hit" if n in hits else "ball-main"}">{n}</span>'
        for n in numbers
    )
    st.markdown(f'<div class="board-card">{html}</div>', unsafe_allow_html=True)


# -- Pipeline (Cached) ----------------------------------------------------

@st.cache_resource
def get_analyzer(raw_text):
    history = prepare(raw_text, DEFAULT_CONFIG)
    return HistoryAnalyzer(history, DEFAULT_CONFIG) if history else None


@st.cache_data(ttl=3600)
def run_request(raw_text, request_type):
    """Run one worker request to completion and return every message it posted."""
    with PipelineWorker(DEFAULT_CONFIG) as worker:
        worker.submit({"type": request_type, "payload": {"raw_data": raw_text}}).result()
        return worker.drain()


def _result_of(messages, result_type):
    for msg in messages:
        if msg.type == "error":
            st.error(msg.payload)
            return None
        if msg.type == result_type:
            return msg.payload
    return None


# -- Sidebar --------------------------------------------------------------

st.sidebar.markdown("## XSMB Lô Predictor")

page = st.sidebar.radio(
    "Navigate",
    ["Dashboard", "Predictions", "Backtest", "Historical Results", "Methodology"],
)

st.sidebar.markdown("---")
uploaded = st.sidebar.file_uploader("Upload history (.txt)", type=["txt"])
pasted = st.sidebar.text_area("...or paste raw XSMB text", height=150)

st.sidebar.markdown("---")
st.sidebar.markdown(
    "**Disclaimer:** This is for educational purposes only. "
    "XSMB is a random lottery -- no model can guarantee wins."
)


# -- Load Data ------------------------------------------------------------

if uploaded is not None:
    raw_text = uploaded.getvalue().decode("utf-8")
elif pasted.strip():
    raw_text = pasted
elif os.path.exists(DEFAULT_DATA_PATH):
    raw_text = load_raw_file(DEFAULT_DATA_PATH)
else:
    raw_text = ""

analyzer = get_analyzer(raw_text) if raw_text else None
if analyzer is None:
    st.markdown('<div class="main-header">XSMB Lô Predictor</div>', unsafe_allow_html=True)
    st.info("Upload or paste an XSMB history to get started.")
    st.stop()

history = analyzer.history
frame = history_to_frame(history)


# ==========================================================================
# PAGE 1: DASHBOARD
# ==========================================================================

if page == "Dashboard":
    st.markdown('<div class="main-header">Statistical Analysis Dashboard</div>', unsafe_allow_html=True)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Draw Days", len(history))
    with col2:
        st.metric("Date Range", f"{frame['date'].min():%Y-%m-%d} -> {frame['date'].max():%Y-%m-%d}")
    with col3:
        st.metric("Next Weekday", WEEKDAYS[analyzer.next_day_of_week()])
    with col4:
        st.metric("Min History", f"{DEFAULT_CONFIG.min_history} days")

    st.markdown("---")

    # -- 1. Frequency Bar Chart -------------------------------------------
    st.subheader("Number Frequency Analysis")
    window = st.select_slider("Window (days)", options=[3, 7, 30, 60, 120, 200], value=30)
    freq = analyzer.numbers_frequency(window)
    hot = set(analyzer.hot_numbers(10, window))
    cold = set(analyzer.cold_numbers(10, window))

    freq_df = pd.DataFrame([{"Number": n, "Count": c} for n, c in freq.items()])
    colors = ["#2ECC71" if n in hot else "#E74C3C" if n in cold else "#3498DB"
              for n in freq_df["Number"]]
    fig = go.Figure(go.Bar(
        x=freq_df["Number"],
        y=freq_df["Count"],
        marker_color=colors,
        hovertemplate="Number %{x}<br>Count: %{y}<extra></extra>",
    ))
    fig.update_layout(
        title=f"Lô Frequency (last {window} days)",
        xaxis_title="Number",
        yaxis_title="Frequency",
        template="plotly_dark",
        height=400,
    )
    fig.add_annotation(x=0.02, y=0.98, xref="paper", yref="paper",
                       text="Green=Hot | Blue=Normal | Red=Cold",
                       showarrow=False, font=dict(size=11))
    st.plotly_chart(fig, use_container_width=True)

    # -- 2. Gan Chart -----------------------------------------------------
    st.subheader("Lô Gan (Longest Absences)")
    gan_df = pd.DataFrame(analyzer.filtered_gan_numbers(min_days=1, top_n=30))
    if not gan_df.empty:
        fig = px.bar(gan_df, x="number", y="days_gone",
                     title="Top 30 Gan Numbers",
                     template="plotly_dark", color="days_gone",
                     color_continuous_scale="YlOrRd",
                     labels={"number": "Number", "days_gone": "Days Gone"})
        fig.update_layout(height=400)
        st.plotly_chart(fig, use_container_width=True)

    # -- 3. Totals and Zones ----------------------------------------------
    col_tot, col_zone = st.columns(2)

    with col_tot:
        totals = analyzer.totals_frequency(DEFAULT_CONFIG.lookback.medium)
        fig = px.bar(x=list(totals.keys()), y=list(totals.values()),
                     title="Digit Totals (last 30 days)",
                     template="plotly_dark",
                     labels={"x": "Total", "y": "Days"})
        st.plotly_chart(fig, use_container_width=True)

    with col_zone:
        zones = analyzer.zone_frequencies(DEFAULT_CONFIG.lookback.medium)
        labels = [f"{name} ({low:02d}-{high:02d})" for name, low, high in ZONES]
        fig = px.pie(names=labels, values=[zones[name] for name, _, _ in ZONES],
                     title="Zone Share (last 30 days)", template="plotly_dark")
        st.plotly_chart(fig, use_container_width=True)

    # -- 4. Head / Tail Heatmap -------------------------------------------
    st.subheader("Head x Tail Heatmap")
    grid = [[freq[f"{h}{t}"] for t in range(10)] for h in range(10)]
    fig = px.imshow(grid, text_auto=True, template="plotly_dark",
                    labels={"x": "Tail", "y": "Head", "color": "Count"},
                    color_continuous_scale="YlOrRd")
    st.plotly_chart(fig, use_container_width=True)


# ==========================================================================
# PAGE 2: PREDICTIONS
# ==========================================================================

elif page == "Predictions":
    st.markdown('<div class="main-header">Next Draw Prediction</div>', unsafe_allow_html=True)

    if len(history) < DEFAULT_CONFIG.min_history:
        st.warning(f"At least {DEFAULT_CONFIG.min_history} days are needed; "
                   f"only {len(history)} loaded.")
    else:
        with st.spinner("Generating prediction..."):
            messages = run_request(raw_text, "process_data")
        for msg in messages:
            if msg.type == "status":
                st.caption(msg.payload)
        result = _result_of(messages, "prediction_result")
        if result:
            st.subheader(f"{len(result['predicted_numbers'])} Numbers")
            render_balls(result["predicted_numbers"])
            st.caption(f"Based on {result['history_length']} days and "
                       f"{result['active_strategies']} strategies.")

            st.subheader("Strategy Weights")
            weights_df = pd.DataFrame([
                {"Strategy": s.STRATEGY_NAME, "Weight": DEFAULT_CONFIG.weight_for(s.STRATEGY_NAME),
                 "Description": s.DESCRIPTION}
                for s in DEFAULT_STRATEGIES
            ])
            st.dataframe(weights_df, use_container_width=True)

    st.markdown(
        '<div class="disclaimer">Scores are heuristics over past draws. '
        'Every number has the same chance in a fair draw.</div>',
        unsafe_allow_html=True,
    )


# ==========================================================================
# PAGE 3: BACKTEST
# ==========================================================================

elif page == "Backtest":
    st.markdown('<div class="main-header">Walk-Forward Backtest</div>', unsafe_allow_html=True)

    if st.button("Run Backtest"):
        with st.spinner("Running backtest... this replays every test day."):
            messages = run_request(raw_text, "run_backtest")
        summary = _result_of(messages, "backtest_result")

        if summary and summary.get("reason"):
            st.info(summary["reason"])
        elif summary:
            col1, col2, col3, col4 = st.columns(4)
            with col1:
                st.metric("Days Tested", summary["total_days_tested"],
                          delta=f"{summary['failed_days']} failed", delta_color="off")
            with col2:
                st.metric("Avg Correct / Day", f"{summary['avg_correct_per_day']:.2f} / 16")
            with col3:
                st.metric("Profitable Days", f"{summary['pct_days_profitable']:.1f}%")
            with col4:
                st.metric("ROI", f"{summary['roi']:.2f}%")

            days = list(range(1, summary["total_days_tested"] + 1))
            fig = px.histogram(x=summary["daily_correct_counts"], nbins=17,
                               title="Correct Numbers per Day",
                               template="plotly_dark",
                               labels={"x": "Numbers Correct", "count": "Days"})
            st.plotly_chart(fig, use_container_width=True)

            cumulative = pd.Series(summary["daily_net_profits"]).cumsum()
            fig = go.Figure(go.Scatter(x=days, y=cumulative, mode="lines",
                                       line=dict(color="#4ECDC4")))
            fig.update_layout(title="Cumulative Net Profit (VND)", template="plotly_dark",
                              xaxis_title="Test Day", yaxis_title="VND", height=400)
            st.plotly_chart(fig, use_container_width=True)

            perf = summary["strategy_performance"]
            if perf:
                st.subheader("Strategy Attribution")
                perf_df = pd.DataFrame([
                    {"Strategy": name, "Hits Supported": d["correct_numbers_supported"],
                     "Influence": round(d["total_influence_score"], 2)}
                    for name, d in perf.items()
                ]).sort_values("Influence", ascending=False)
                st.dataframe(perf_df, use_container_width=True)

            sig = summary.get("significance")
            if sig:
                st.subheader("Significance vs Random Picks")
                st.json(sig)
    else:
        st.info(f"Backtests replay the last {DEFAULT_CONFIG.backtest_window} days "
                f"and need more than {DEFAULT_CONFIG.min_history} days of history.")


# ==========================================================================
# PAGE 4: HISTORICAL RESULTS
# ==========================================================================

elif page == "Historical Results":
    st.markdown('<div class="main-header">Historical Results Browser</div>', unsafe_allow_html=True)

    view = frame.copy()
    view["day_of_week"] = view["day_of_week"].map(lambda d: WEEKDAYS[d])
    view = view.sort_values("date", ascending=False)

    search = st.text_input("Find days containing number (e.g. 07)")
    if search.strip() in ALL_NUMBERS:
        view = view[view["numbers"].str.split().apply(lambda nums: search.strip() in nums)]

    st.dataframe(view, use_container_width=True, height=600)


# ==========================================================================
# PAGE 5: METHODOLOGY
# ==========================================================================

elif page == "Methodology":
    st.markdown('<div class="main-header">Methodology</div>', unsafe_allow_html=True)

    st.markdown("""
    Each of the twelve strategies scores every number 00-99 on a 0-100 scale.
    Scores are combined with the weights below, then adjusted:

    - numbers from the last day are damped (x0.5), two days ago (x0.8)
    - very long gan (> 90 days) with a low score is damped further
    - medium gan (8-15 days) gets a small bonus
    - reverses and shadows of yesterday's numbers get a bonus

    The final 16 numbers are drawn from the top 32, spreading heads, tails
    and digit totals.
    """)
    for s in DEFAULT_STRATEGIES:
        st.markdown(f"**{s.STRATEGY_NAME}** ({DEFAULT_CONFIG.weight_for(s.STRATEGY_NAME):.2f}): "
                    f"{s.DESCRIPTION}")
