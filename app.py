"""
AI Economy Lab - Interactive Dashboard

Projects employment, wages, GDP, a sector-disruption index, inequality and
social stability for 25 tracked US occupations under a set of policy sliders.
The whole simulation re-runs on every slider change.

Run with: streamlit run app.py
"""

import streamlit as st

from economy_lab.assistant import build_system_prompt, parse_slider_changes, strip_slider_commands
from economy_lab.charts import (
    STABILITY_COLORS,
    employment_change_chart,
    line_chart,
    multi_line,
    stability_breakdown_chart,
)
from economy_lab.config import DEFAULT_PARAMS, ModelParams, SliderInputs, year_labels
from economy_lab.engine import run_simulation
from economy_lab.occupations import DEFAULT_DATASET
from economy_lab.presets import PRESETS, get_preset, matching_preset
from economy_lab.results import (
    employment_frame,
    history_frame,
    occupation_frame,
    stability_frame,
    stability_label,
    wage_frame,
)
from economy_lab.variants import VARIANTS

# ── Page config ──────────────────────────────────────────────────────
st.set_page_config(
    page_title="AI Economy Lab",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ── Sidebar ──────────────────────────────────────────────────────────
st.sidebar.title("Policy Controls")

preset_name = st.sidebar.selectbox(
    "Scenario Preset",
    ["Custom"] + [p.label for p in PRESETS],
    index=1,  # default to Business as Usual
)
if preset_name != "Custom":
    preset_sliders = get_preset(preset_name).sliders
else:
    preset_sliders = SliderInputs.from_mapping({}, DEFAULT_PARAMS)

variant_name = st.sidebar.radio(
    "Disruption Index",
    list(VARIANTS),
    format_func=lambda name: VARIANTS[name].index_label,
    horizontal=True,
)
params = ModelParams(disruption_variant=variant_name)
variant = VARIANTS[variant_name]

# Only the shock and resilience levers of the selected variant matter
shown = [
    name for name in params.sliders
    if name not in {"energy_cost", "supply_chain_resilience",
                    "open_source_access", "talent_pipeline_strength"}
    or name in {variant.shock_slider, variant.resilience_slider}
]

values = preset_sliders.as_dict()
for name in shown:
    st.session_state.setdefault(f"sl_{preset_name}_{name}", float(values[name]))

# Assistant replies pasted here move the sliders before they are drawn
reply = st.chat_input("Paste an assistant reply with SLIDER_CHANGE commands")
if reply:
    changes = parse_slider_changes(reply, params)
    for name, value in changes:
        values[name] = value
        st.session_state[f"sl_{preset_name}_{name}"] = value
    st.session_state["assistant_reply"] = (strip_slider_commands(reply), changes)

with st.sidebar.expander("Sliders", expanded=True):
    for name in shown:
        spec = params.sliders[name]
        values[name] = st.slider(
            spec.label,
            float(spec.min), float(spec.max),
            step=float(spec.step),
            help=spec.tooltip,
            key=f"sl_{preset_name}_{name}",
        )
sliders = SliderInputs.from_mapping(values, params)

with st.sidebar.expander("Advanced", expanded=False):
    years = st.slider("Simulation Length (years)", 5, 30, params.default_years)

matched = matching_preset(sliders)
st.sidebar.caption(f"Matches preset: {matched.label}" if matched else "Custom settings")

# ── Run simulation ───────────────────────────────────────────────────
history = run_simulation(sliders, params, years)
df = history_frame(history)
labels = year_labels(years, params.start_year)

# ── Header ───────────────────────────────────────────────────────────
st.title("AI Economy Lab")
st.markdown(
    "Illustrative model of how AI capability, adoption and policy shape "
    "employment, wages and social stability across tracked occupations."
)

view_year = st.select_slider("Timeline", options=labels, value=labels[-1])
vi = labels.index(view_year)
state = history[vi]
first = history[0]

c1, c2, c3, c4, c5 = st.columns(5)
c1.metric("GDP Index", f"{state.gdp_index:.1f}", f"{state.gdp_index - first.gdp_index:+.1f}")
c2.metric(
    "Unemployment",
    f"{state.unemployment_rate * 100:.1f}%",
    f"{(state.unemployment_rate - first.unemployment_rate) * 100:+.1f}pp",
    delta_color="inverse",
)
c3.metric(variant.index_label, f"{state.disruption_index:.3f}",
          f"{state.disruption_index - first.disruption_index:+.3f}", delta_color="inverse")
c4.metric("Inequality Index", f"{state.inequality_index:.2f}",
          f"{state.inequality_index - first.inequality_index:+.2f}", delta_color="inverse")
c5.metric("Jobs Lost", f"{(first.total_employment - state.total_employment) / 1e6:.2f}M")

# Stability meter
label = stability_label(state.stability_index)
st.markdown(
    f"**Stability Index:** "
    f"<span style='color:{STABILITY_COLORS[label]}'>{state.stability_index:.1f} / 100 ({label})</span>",
    unsafe_allow_html=True,
)
st.progress(max(0.0, min(1.0, state.stability_index / 100)))

# ── Tabs ─────────────────────────────────────────────────────────────
tab_overview, tab_occ, tab_stability, tab_events, tab_assistant, tab_raw = st.tabs(
    ["Overview", "Occupations", "Stability", "Event Log", "Assistant", "Raw Data"]
)

with tab_overview:
    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(
            line_chart(labels, df["gdp_index"].tolist(), "GDP Index (100 = start)", "Index",
                       color="#2ca02c", marker_index=vi),
            use_container_width=True,
        )
        st.plotly_chart(
            line_chart(labels, df["disruption_index"].tolist(), variant.index_label, "Index",
                       color="#ff7f0e", fmt="%{y:.3f}", marker_index=vi),
            use_container_width=True,
        )
    with col2:
        st.plotly_chart(
            line_chart(labels, (df["unemployment_rate"] * 100).tolist(),
                       "Unemployment Rate (%)", "%", color="#d62728", marker_index=vi),
            use_container_width=True,
        )
        st.plotly_chart(
            line_chart(labels, df["inequality_index"].tolist(), "Inequality Index", "Index",
                       color="#9467bd", fmt="%{y:.2f}", marker_index=vi),
            use_container_width=True,
        )
    st.plotly_chart(
        line_chart(labels, df["stability_index"].tolist(), "Stability Index (0-100)", "Index",
                   color="#e45756", marker_index=vi),
        use_container_width=True,
    )

with tab_occ:
    emp = employment_frame(history, DEFAULT_DATASET)
    st.plotly_chart(employment_change_chart(emp), use_container_width=True)
    wages = wage_frame(history, DEFAULT_DATASET)
    st.plotly_chart(
        multi_line(labels, {name: (wages[name] / 1000).tolist() for name in wages.columns},
                   "Mean Wage by Occupation ($K/year)", "$K", height=420),
        use_container_width=True,
    )

with tab_stability:
    stab = stability_frame(history, sliders, params)
    st.plotly_chart(stability_breakdown_chart(stab), use_container_width=True)
    st.dataframe(stab.round(2), use_container_width=True)

with tab_events:
    # Show newest first, up to the scrubbed year
    for entry in reversed(state.event_log):
        st.markdown(f"- {entry}")

with tab_assistant:
    last = st.session_state.get("assistant_reply")
    if last is None:
        st.info("Paste an assistant reply in the chat box below to apply its slider changes.")
    else:
        text, changes = last
        if text:
            st.markdown(text)
        for name, value in changes:
            st.caption(f"Set {params.sliders[name].label} to {value:g}")
    with st.expander("System prompt for the assistant", expanded=False):
        st.code(build_system_prompt(history, sliders, params), language=None)

with tab_raw:
    st.subheader(f"Index Values: {state.year}")
    st.dataframe(df.round(4), use_container_width=True)
    st.subheader("Occupation Detail")
    st.dataframe(occupation_frame(state, DEFAULT_DATASET).round(1), use_container_width=True)

# ── Footer ───────────────────────────────────────────────────────────
st.divider()
st.caption(
    "This is an illustrative, uncalibrated model for educational exploration. "
    "Directions are more meaningful than magnitudes."
)
