from datetime import datetime

import matplotlib.pyplot as plt
import streamlit as st

from kombucha_calc.config import DEFAULTS, RANGES, SAMPLE_INTERVAL_SEC, configure_logging
from kombucha_calc.errors import InvalidDurationError
from kombucha_calc.formatting import (
    format_elapsed,
    format_elapsed_days,
    format_progress,
    format_projection,
)
from kombucha_calc.model import LINEAR_BAND, POWER_LAW, check_duration, estimate_duration_days
from kombucha_calc.projection import advisory_for, project, stage_for
from kombucha_calc.report import (
    plot_progress,
    reference_table,
    setup_plot_style,
    summary_text,
    timeline,
)
from kombucha_calc.sampler import ElapsedSampler
from kombucha_calc.settings import SettingsStore, resolve_start

configure_logging()

# Page configuration
st.set_page_config(
    page_title="Kombucha Fermentation Calculator",
    page_icon="🍵",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-title {
        font-size: 2.8rem;
        text-align: center;
        color: #b45309 !important;
        margin-bottom: 1rem;
    }
    .result-display {
        background: linear-gradient(135deg, #fef3c7 0%, #ffedd5 100%);
        padding: 2rem;
        border-radius: 1rem;
        border: 2px solid #f59e0b;
        text-align: center;
        margin: 2rem 0;
        box-shadow: 0 10px 30px rgba(0, 0, 0, 0.1);
    }
    .highlight-box {
        background-color: #f9fafb;
        padding: 1.5rem;
        border-radius: 0.75rem;
        border: 2px dashed #d1d5db;
        text-align: center;
        margin: 1rem 0;
    }
</style>
""", unsafe_allow_html=True)

MODEL_LABELS = {
    LINEAR_BAND: "Comfort band (20-28°C linear)",
    POWER_LAW: "Power law (24/T)^1.8",
}

# ============================================================================
# SETTINGS
# ============================================================================

def init_state(store):
    """Load saved settings once per session and seed the widgets from them"""
    if "settings" in st.session_state:
        return
    settings = store.load()
    st.session_state.settings = settings
    st.session_state.temperature_c = float(settings.temperature_c)
    st.session_state.starter_percent = float(settings.starter_percent)
    st.session_state.sugar_g_per_l = float(settings.sugar_g_per_l)
    if settings.start_instant is not None:
        st.session_state.start_date = settings.start_instant.date()
        st.session_state.start_hour = settings.start_instant.hour
    else:
        st.session_state.start_date = None
        st.session_state.start_hour = datetime.now().hour
    st.session_state.model = LINEAR_BAND
    st.session_state.sampler = ElapsedSampler(interval=SAMPLE_INTERVAL_SEC)


def clear_start():
    st.session_state.start_date = None


def reset_inputs():
    for name, value in DEFAULTS.items():
        st.session_state[name] = value


def read_inputs(current):
    """Build settings from the widgets, keeping the saved minutes of an unchanged start"""
    start = resolve_start(current.start_instant, st.session_state.start_date,
                          st.session_state.start_hour)
    return current.with_changes(
        temperature_c=st.session_state.temperature_c,
        starter_percent=st.session_state.starter_percent,
        sugar_g_per_l=st.session_state.sugar_g_per_l,
        start_instant=start,
    )


def sidebar():
    with st.sidebar:
        st.markdown("### **Start Date & Time**")
        col1, col2 = st.columns([2, 1])
        with col1:
            st.date_input("**Start date**", key="start_date", format="YYYY-MM-DD")
        with col2:
            st.selectbox(
                "**Hour**",
                list(range(24)),
                format_func=lambda h: f"{h:02d}:00",
                key="start_hour"
            )
        st.button("Clear start date", on_click=clear_start, use_container_width=True)

        st.markdown("---")
        st.markdown("### **Brew Parameters**")

        low, high, step = RANGES["temperature_c"]
        st.slider(
            "**Temperature (°C)**",
            min_value=low,
            max_value=high,
            step=step,
            format="%.1f",
            key="temperature_c",
            help="Temperature of the brewing vessel"
        )

        low, high, step = RANGES["starter_percent"]
        st.slider(
            "**Starter Amount (%)**",
            min_value=low,
            max_value=high,
            step=step,
            format="%.0f",
            key="starter_percent",
            help="Share of previously fermented kombucha added to the new batch"
        )

        low, high, step = RANGES["sugar_g_per_l"]
        st.slider(
            "**Sugar per Liter (g/L)**",
            min_value=low,
            max_value=high,
            step=step,
            format="%.0f",
            key="sugar_g_per_l",
        )

        st.button("Reset to defaults", on_click=reset_inputs, use_container_width=True)

        st.markdown("---")
        st.selectbox(
            "**Temperature model**",
            [LINEAR_BAND, POWER_LAW],
            format_func=MODEL_LABELS.get,
            key="model",
            help="The two models diverge outside the 20-28°C band"
        )

# ============================================================================
# RESULTS
# ============================================================================

@st.fragment(run_every=SAMPLE_INTERVAL_SEC)
def results_panel(settings, model):
    sampler = st.session_state.sampler
    elapsed_days = sampler.elapsed_days
    now = datetime.now()

    try:
        target = check_duration(estimate_duration_days(
            settings.temperature_c, settings.starter_percent, settings.sugar_g_per_l, model
        ))
    except InvalidDurationError as e:
        st.error(str(e))
        return

    projection = project(elapsed_days, target, settings.start_instant)
    stage = stage_for(projection.progress_percent)

    st.markdown(f"""
    <div class="result-display">
        <p style="color: #6b7280; font-size: 1.1rem; margin: 0;">Projected Date & Time</p>
        <h1 style="color: #b45309; font-size: 3.5rem; margin: 0; font-weight: bold;">
            {format_projection(projection.projected_finish_instant, now)}
        </h1>
        <p style="color: #6b7280; font-size: 1.1rem; margin-top: 0.5rem;">
            {projection.projected_finish_instant:%A %Y-%m-%d %H:%M} • {target:.1f} day estimate
        </p>
    </div>
    """, unsafe_allow_html=True)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Time Elapsed", format_elapsed(elapsed_days))
    with col2:
        st.metric("Elapsed Days", format_elapsed_days(elapsed_days))
    with col3:
        st.metric("Progress", format_progress(projection.progress_percent))
    with col4:
        st.metric("Stage", stage.label)

    st.markdown(
        f'<p style="color: {stage.hex_color}; font-weight: bold; margin-bottom: 0.25rem;">'
        f'{stage.label}</p>',
        unsafe_allow_html=True
    )
    st.progress(int(projection.progress_percent))

    advisory = advisory_for(projection.progress_percent)
    if advisory and projection.progress_percent >= 100:
        st.success(advisory)
    elif advisory:
        st.warning(advisory)

    st.markdown("---")
    st.markdown("### **Fermentation Progression**")
    fig = plot_progress(settings, projection, elapsed_days, model)
    st.pyplot(fig)
    plt.close(fig)

    st.markdown("---")
    st.markdown("### **Export Results**")
    col_e1, col_e2 = st.columns(2)
    with col_e1:
        st.download_button(
            label="📊 Download Timeline (CSV)",
            data=timeline(settings, projection).to_csv(index=False),
            file_name="kombucha_timeline.csv",
            mime="text/csv",
            use_container_width=True
        )
    with col_e2:
        st.download_button(
            label="📄 Download Summary (TXT)",
            data=summary_text(settings, projection, elapsed_days, now, model),
            file_name="kombucha_summary.txt",
            mime="text/plain",
            use_container_width=True
        )


def empty_view(settings, model):
    st.markdown("""
    <div class="highlight-box">
    <h3>🕒 No batch in progress</h3>
    <p>Enter your fermentation start date and time to see progress</p>
    </div>
    """, unsafe_allow_html=True)

    st.markdown("---")
    st.markdown("### **Quick Reference Table**")
    st.caption(f"Estimated days with {settings.starter_percent:g}% starter "
               f"and {settings.sugar_g_per_l:g} g/L sugar")
    st.dataframe(
        reference_table(settings.starter_percent, settings.sugar_g_per_l, model, step=2.5),
        use_container_width=True,
        hide_index=True
    )


def main():
    """Main application"""

    setup_plot_style()
    store = SettingsStore()
    init_state(store)

    st.markdown('<h1 class="main-title">🍵 Kombucha Fermentation Calculator</h1>', unsafe_allow_html=True)
    st.markdown("### Estimate when your first fermentation will be ready")

    sidebar()

    settings = read_inputs(st.session_state.settings)
    st.session_state.settings = store.commit(st.session_state.settings, settings)

    sampler = st.session_state.sampler
    sampler.track(settings.start_instant)

    if settings.start_instant is None:
        empty_view(settings, st.session_state.model)
    else:
        results_panel(settings, st.session_state.model)


if __name__ == "__main__":
    main()
