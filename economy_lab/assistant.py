"""
Helpers for the chat assistant that sits next to the dashboard.

The assistant itself (an LLM behind an HTTP API) is an external collaborator.
This module only formats the latest simulation state into a system prompt and
parses the slider-change commands the model may emit back, so that changes
re-enter the engine as ordinary slider values. The dashboard's chat box
applies pasted replies through `parse_slider_changes` and shows the prompt
built by `build_system_prompt`.
"""

import json
import re
from dataclasses import fields
from typing import List, Optional, Sequence, Tuple

from .config import DEFAULT_PARAMS, ModelParams, SliderInputs
from .engine import SimulationState
from .results import stability_label
from .variants import get_variant

SLIDER_CHANGE_RE = re.compile(r"SLIDER_CHANGE:\s*(\{[^}]+\})")
_STRIP_RE = re.compile(r"SLIDER_CHANGE:\s*\{[^}]+\}\n?")

# Keys as the browser front-end spells them
CAMEL_CASE_KEYS = {
    "aiCapability": "ai_capability",
    "adoptionSpeed": "adoption_speed",
    "laborProtection": "labor_protection",
    "corporateConcentration": "corporate_concentration",
    "energyCost": "energy_cost",
    "supplyChainResilience": "supply_chain_resilience",
    "openSourceAccess": "open_source_access",
    "talentPipelineStrength": "talent_pipeline_strength",
}


def build_system_prompt(
    history: Sequence[SimulationState],
    sliders: SliderInputs,
    params: Optional[ModelParams] = None,
) -> str:
    p = DEFAULT_PARAMS if params is None else params
    variant = get_variant(p.disruption_variant)
    latest = history[-1]
    recent_events = "\n".join(latest.event_log[-3:])
    end_year = p.start_year + len(history) - 1

    slider_lines = []
    for f in fields(SliderInputs):
        spec = p.sliders.get(f.name)
        label = spec.label if spec else f.name
        rng = f" ({spec.min:g} to {spec.max:g})" if spec else ""
        slider_lines.append(f"- {label}: {getattr(sliders, f.name):g}{rng}")

    valid_keys = ", ".join(f.name for f in fields(SliderInputs))

    return f"""You are an AI economist assistant embedded in AI Economy Lab, a simulation of AI's impact on the US labor market from {p.start_year} to {end_year}.

CURRENT SIMULATION STATE (Year {latest.year}):
- GDP Index: {latest.gdp_index:.1f} (100 = baseline {p.start_year})
- Unemployment: {latest.unemployment_rate * 100:.1f}% (structural baseline ~{p.structural_unemployment * 100:.0f}%)
- {variant.index_label}: {latest.disruption_index:.3f} (1.000 = no change from baseline)
- Inequality Index: {latest.inequality_index:.2f} (1.00 = baseline)
- Stability Index: {latest.stability_index:.1f}/100 ({stability_label(latest.stability_index)})

CURRENT SLIDER SETTINGS:
{chr(10).join(slider_lines)}

RECENT EVENTS:
{recent_events}

INSTRUCTIONS:
1. Answer in plain, direct English. 2-4 sentences unless the user asks for detail.
2. Base all numbers on the state above; do not invent figures.
3. If the user asks to change one or more sliders, include this exact format for each change:
   SLIDER_CHANGE: {{"key": "slider_name", "value": 0.8}}
   Valid keys: {valid_keys}
4. Do NOT show the SLIDER_CHANGE lines in your visible response text; they are parsed automatically.
5. After slider changes, briefly explain what effect the change will have."""


def parse_slider_changes(text: str, params: Optional[ModelParams] = None) -> List[Tuple[str, float]]:
    """
    Extract `SLIDER_CHANGE: {"key": ..., "value": ...}` commands from model output.

    Malformed JSON and undeclared keys are skipped. Values are clamped into the
    declared slider range because the engine itself never re-validates them.
    """
    p = DEFAULT_PARAMS if params is None else params
    changes: List[Tuple[str, float]] = []
    for match in SLIDER_CHANGE_RE.finditer(text):
        try:
            parsed = json.loads(match.group(1))
        except json.JSONDecodeError:
            continue
        if not isinstance(parsed, dict) or not isinstance(parsed.get("key"), str):
            continue
        key = CAMEL_CASE_KEYS.get(parsed["key"], parsed["key"])
        value = parsed.get("value")
        if key not in p.sliders:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        spec = p.sliders[key]
        changes.append((key, min(spec.max, max(spec.min, float(value)))))
    return changes


def strip_slider_commands(text: str) -> str:
    return _STRIP_RE.sub("", text).strip()


def apply_slider_changes(sliders: SliderInputs, changes: Sequence[Tuple[str, float]]) -> SliderInputs:
    return sliders.with_values(**dict(changes)) if changes else sliders
