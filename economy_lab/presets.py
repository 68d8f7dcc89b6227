"""Named slider presets offered by the dashboard."""

from dataclasses import dataclass, fields
from typing import List, Optional

from .config import SliderInputs


@dataclass(frozen=True)
class Preset:
    label: str
    description: str
    sliders: SliderInputs


PRESETS: List[Preset] = [
    Preset(
        "Business as Usual",
        "Moderate AI growth, limited policy response",
        SliderInputs(
            ai_capability=0.3,
            adoption_speed=0.4,
            regulation=0.3,
            retraining=0.2,
            transfers=0.2,
            labor_protection=0.3,
            corporate_concentration=0.4,
            energy_cost=0.0,
            supply_chain_resilience=0.5,
            open_source_access=0.0,
            talent_pipeline_strength=0.5,
        ),
    ),
    Preset(
        "AI Boom",
        "Rapid AI deployment, minimal friction",
        SliderInputs(
            ai_capability=0.9,
            adoption_speed=0.85,
            regulation=0.1,
            retraining=0.1,
            transfers=0.1,
            labor_protection=0.1,
            corporate_concentration=0.7,
            energy_cost=0.1,
            supply_chain_resilience=0.3,
            open_source_access=0.4,
            talent_pipeline_strength=0.4,
        ),
    ),
    Preset(
        "Heavy Regulation",
        "Government slows AI, protects workers",
        SliderInputs(
            ai_capability=0.5,
            adoption_speed=0.3,
            regulation=0.85,
            retraining=0.5,
            transfers=0.4,
            labor_protection=0.8,
            corporate_concentration=0.2,
            energy_cost=0.0,
            supply_chain_resilience=0.6,
            open_source_access=-0.2,
            talent_pipeline_strength=0.6,
        ),
    ),
    Preset(
        "UBI Future",
        "Strong safety net, robust retraining",
        SliderInputs(
            ai_capability=0.6,
            adoption_speed=0.55,
            regulation=0.4,
            retraining=0.8,
            transfers=0.85,
            labor_protection=0.5,
            corporate_concentration=0.3,
            energy_cost=-0.1,
            supply_chain_resilience=0.7,
            open_source_access=0.2,
            talent_pipeline_strength=0.8,
        ),
    ),
]


def get_preset(label: str) -> Preset:
    for preset in PRESETS:
        if preset.label == label:
            return preset
    raise KeyError(label)


def matching_preset(sliders: SliderInputs, tolerance: float = 1e-3) -> Optional[Preset]:
    """The preset whose every slider matches the given values, or None."""
    for preset in PRESETS:
        if all(
            abs(getattr(preset.sliders, f.name) - getattr(sliders, f.name)) < tolerance
            for f in fields(SliderInputs)
        ):
            return preset
    return None
