"""
Event-log narrative for one simulated year.

A pure function of the step's intermediate and final quantities: a fixed,
priority-ordered list of threshold checks, each contributing at most one
message. When nothing fires, a "stable year" message is picked by year index
so that identical inputs always produce identical text.
"""

from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from .config import ModelParams, SliderInputs
from .occupations import OccupationDataset
from .variants import DisruptionVariant

STABLE_YEAR_MESSAGES = (
    "{year}: Economy holding steady. Conditions stable across all indicators.",
    "{year}: No major disruptions this year. Gradual AI integration continuing.",
    "{year}: Moderate conditions. Employment and prices within normal range.",
)


class StepOutcome(NamedTuple):
    """Quantities computed by one step that the narrative reads."""

    year: int
    effective_adoption: float
    employment: np.ndarray
    wage: np.ndarray
    prev_wage: np.ndarray
    shortfall: float
    unemployment_rate: float
    gdp_index: float
    disruption_index: float
    inequality_index: float
    stability_index: float


def most_displaced(employment: np.ndarray, dataset: OccupationDataset) -> Tuple[Optional[int], float]:
    """Index and size of the largest absolute employment loss from baseline (first wins ties)."""
    if len(dataset) == 0:
        return None, 0.0
    loss = dataset.base_employment - employment
    idx = int(np.argmax(loss))
    if loss[idx] <= 0:
        return None, 0.0
    return idx, float(loss[idx])


def top_wage_gainer(wage: np.ndarray, prev_wage: np.ndarray) -> Tuple[Optional[int], float]:
    """Index and size of the largest absolute wage gain this year (first wins ties)."""
    if wage.size == 0:
        return None, 0.0
    gain = wage - prev_wage
    idx = int(np.argmax(gain))
    if gain[idx] <= 0:
        return None, 0.0
    return idx, float(gain[idx])


def generate_events(
    outcome: StepOutcome,
    sliders: SliderInputs,
    params: ModelParams,
    dataset: OccupationDataset,
    variant: DisruptionVariant,
) -> List[str]:
    t = params.narrative
    yr = outcome.year
    ai = sliders.ai_capability
    events: List[str] = []

    # Automation wave
    if ai > t.automation_capability and outcome.effective_adoption > t.automation_adoption:
        idx, loss = most_displaced(outcome.employment, dataset)
        if idx is None:
            name, drop = "routine workers", "significantly"
        else:
            occ = dataset.occupations[idx]
            name = occ.name
            drop = f"{loss / occ.employment * 100:.1f}%"
        if ai > t.automation_heavy_capability:
            events.append(f"{yr}: Heavy automation wave; {name} down {drop} from baseline.")
        elif ai > t.automation_accelerating_capability:
            events.append(f"{yr}: AI adoption accelerating; {name} seeing notable job displacement.")
        else:
            events.append(f"{yr}: {name} employment declining as AI handles routine tasks.")

    # Wage gains for complementary roles
    if ai > t.wage_message_capability:
        idx, gain = top_wage_gainer(outcome.wage, outcome.prev_wage)
        if idx is not None:
            name = dataset.occupations[idx].name
            pct = gain / outcome.prev_wage[idx] * 100
            if ai > t.wage_thriving_capability:
                events.append(
                    f"{yr}: Skilled workers thriving; {name} wages up {pct:.1f}% this year from AI leverage."
                )
            else:
                events.append(f"{yr}: Wages rising for {name} as AI tools boost productivity.")

    # Displacement-sensitive subset
    shortfall_pct = outcome.shortfall * 100
    if outcome.shortfall > t.shortfall_severe:
        events.append(variant.severe_shortfall.format(year=yr, pct=shortfall_pct))
    elif outcome.shortfall > t.shortfall_moderate:
        events.append(variant.moderate_shortfall.format(year=yr, pct=shortfall_pct))

    # Exogenous shock
    shock = getattr(sliders, variant.shock_slider)
    fmt = dict(
        year=yr,
        shock_pct=shock * 100,
        pass_through_pct=shock * params.k_shock_pass_through * 100,
    )
    if shock > t.shock_severe:
        events.append(variant.severe_shock.format(**fmt))
    elif shock > t.shock_moderate:
        events.append(variant.moderate_shock.format(**fmt))
    elif shock < t.shock_relief:
        events.append(variant.shock_relief.format(**fmt))

    # Unemployment
    u = outcome.unemployment_rate
    if u > t.unemployment_crisis:
        events.append(f"{yr}: Unemployment crisis; {u * 100:.1f}% of the workforce displaced.")
    elif u > t.unemployment_surging:
        events.append(f"{yr}: Unemployment surging to {u * 100:.1f}%, straining social systems.")
    elif u > t.unemployment_elevated:
        events.append(f"{yr}: Unemployment elevated at {u * 100:.1f}%, above structural baseline.")

    # Inequality
    ineq = outcome.inequality_index
    if ineq > t.inequality_severe:
        events.append(f"{yr}: Severe inequality (index {ineq:.2f}); top earners capturing most AI gains.")
    elif ineq > t.inequality_rising:
        events.append(f"{yr}: Inequality rising ({ineq:.2f}). Corporate concentration amplifying wage gap.")

    # Policy levers
    if sliders.regulation > t.regulation_strong:
        events.append(f"{yr}: Strong AI regulation constraining adoption rate this year.")
    elif sliders.regulation > t.regulation_friction:
        events.append(f"{yr}: Regulatory friction slowing AI deployment across sectors.")

    if sliders.retraining > t.retraining_active and ai > t.retraining_capability:
        events.append(f"{yr}: Active retraining programs cushioning displacement for some workers.")

    if sliders.transfers > t.transfers_active:
        events.append(f"{yr}: Social transfers helping stabilize household incomes amid disruption.")

    # Stability
    stab = outcome.stability_index
    if stab < t.stability_critical:
        events.append(f"{yr}: CRITICAL: Social stability collapsing ({stab:.0f}/100).")
    elif stab < t.stability_warning:
        events.append(f"{yr}: WARNING: Social stability critically low ({stab:.0f}/100).")
    elif stab < t.stability_stress:
        events.append(f"{yr}: Social stability under stress ({stab:.0f}/100).")

    # GDP
    gdp = outcome.gdp_index
    if gdp > t.gdp_surge:
        events.append(f"{yr}: GDP index surging to {gdp:.1f}; productivity gains outpacing displacement.")
    elif gdp < t.gdp_contraction:
        events.append(f"{yr}: GDP index falling to {gdp:.1f}; output contracting as jobs disappear.")

    if not events:
        template = STABLE_YEAR_MESSAGES[(yr - params.start_year) % len(STABLE_YEAR_MESSAGES)]
        events.append(template.format(year=yr))

    return events
