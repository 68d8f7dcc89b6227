"""
Labor-market simulation engine.

Advances a roster of tracked occupations one year at a time under a set of
policy sliders. Each step models:

1. Institutional Friction
   Regulation and social instability throttle how fast firms actually deploy
   the AI that exists ("effective adoption").

2. Routine Substitution
   Routine, low-social-complexity work is substituted fastest. Labor
   protections and retraining slow the decline, and no occupation falls below
   a retraining-adjusted floor of its baseline headcount.

3. Wage Divergence
   AI-complementary roles get raises (dampened by employer concentration);
   shrinking routine occupations see oversupply-driven wage suppression.

4. Ghost GDP
   Automated output does not vanish: a capital-gains term credits part of the
   displaced wage bill to firm profit, keeping GDP responsive to productivity
   even as employment falls.

5. Sector Disruption
   The shortfall of a displacement-sensitive subset (logistics or
   infrastructure) drives a price/churn index up while automation is immature;
   mature adoption pushes it back down.

6. Inequality and Stability
   Realized wage divergence and corporate concentration accumulate into an
   inequality index. Unemployment (with demand feedback), disruption and
   inequality combine into a 0-100 stability index. The same index computed
   without transfer support feeds back into effective adoption in the next
   step, so transfers raise stability without accelerating layoffs.

All functions here are pure: states are frozen and every step returns a new one.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, NamedTuple, Optional, Tuple, Union

import numpy as np

from .config import DEFAULT_PARAMS, ModelParams, SliderInputs
from .errors import DatasetMismatchError, UnknownOccupationError
from .narrative import StepOutcome, generate_events
from .occupations import DEFAULT_DATASET, OccupationDataset
from .variants import get_variant

logger = logging.getLogger(__name__)


def clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


@dataclass(frozen=True)
class OccupationSnapshot:
    id: str
    employment: float
    wage: float


@dataclass(frozen=True)
class SimulationState:
    """Economy-wide state at the end of one simulated year."""

    year: int

    # Per-occupation arrays, aligned with the dataset order
    occupation_ids: Tuple[str, ...]
    employment: Tuple[float, ...]
    wage: Tuple[float, ...]

    total_employment: float
    unemployment_rate: float
    gdp_index: float  # 100 = start year
    disruption_index: float  # 1.0 = start year
    inequality_index: float  # 1.0 = start year
    stability_index: float  # 0-100
    event_log: Tuple[str, ...]

    # Diagnostic: adoption after regulation drag and stability slowdown
    effective_adoption: float = 0.0
    # Stability and inequality as they would be without transfers; adoption reads these
    pre_transfer_stability: float = 100.0
    gross_inequality_index: float = 1.0
    # Start-year wage bill; carried so the GDP index never re-normalizes
    base_gdp: float = field(default=0.0, repr=False)

    @property
    def occupations(self) -> Dict[str, OccupationSnapshot]:
        return {
            oid: OccupationSnapshot(oid, e, w)
            for oid, e, w in zip(self.occupation_ids, self.employment, self.wage)
        }

    def occupation(self, occupation_id: str) -> OccupationSnapshot:
        try:
            i = self.occupation_ids.index(occupation_id)
        except ValueError:
            raise UnknownOccupationError(occupation_id) from None
        return OccupationSnapshot(occupation_id, self.employment[i], self.wage[i])


class StabilityPenalties(NamedTuple):
    """Points deducted from 100 by each stability component."""

    unemployment: float
    disruption: float
    inequality: float

    @property
    def total(self) -> float:
        return self.unemployment + self.disruption + self.inequality


def _labor_force(dataset: OccupationDataset, params: ModelParams) -> float:
    return params.labor_force if params.labor_force is not None else dataset.labor_force


def effective_adoption(stability: float, sliders: SliderInputs, params: ModelParams) -> float:
    """Adoption speed after regulation drag and the stability-slowdown multiplier."""
    p = params
    slowdown = clamp(
        1 - p.slowdown_max * max(0.0, (p.slowdown_threshold - stability) / p.slowdown_threshold),
        p.stability_adoption_min_multiplier,
        p.stability_adoption_max_multiplier,
    )
    return sliders.adoption_speed * (1 - sliders.regulation * p.k_regulation_drag) * slowdown


def employment_floor(sliders: SliderInputs, params: ModelParams) -> float:
    """Minimum employment as a share of baseline; retraining lands workers in *some* role."""
    return min(1.0, params.employment_floor_ratio + sliders.retraining * params.retraining_floor_boost)


def adjusted_unemployment(unemployment_rate: float, params: ModelParams) -> float:
    """Headline unemployment plus demand feedback above the structural baseline."""
    excess = max(0.0, unemployment_rate - params.structural_unemployment)
    return unemployment_rate + excess * params.k_demand_feedback


def stability_penalties(
    adjusted_unemployment_rate: float,
    disruption_index: float,
    inequality_index: float,
    transfers: float,
    params: ModelParams,
) -> StabilityPenalties:
    p = params
    deviation = max(0.0, disruption_index - 1.0)
    # Transfer-funded buffer absorbs part of the price/churn shock
    buffered = deviation - transfers * p.transfers_disruption_buffer * deviation
    return StabilityPenalties(
        unemployment=adjusted_unemployment_rate * 100 * p.stability_weight_unemployment,
        disruption=buffered * 100 * p.stability_weight_disruption,
        inequality=(inequality_index - 1.0) * p.stability_weight_inequality,
    )


def wage_divergence(
    prev_wage: np.ndarray, wage: np.ndarray, dataset: OccupationDataset, params: ModelParams
) -> float:
    """
    This year's wage gap growth: mean raise among high-complementarity roles
    plus mean cut among high-routine roles, over the average baseline wage.
    """
    if dataset.avg_base_wage <= 0:
        return 0.0
    t = params.narrative
    delta = wage - prev_wage

    high_comp = dataset.complementarity > t.high_complementarity
    gain = float(np.maximum(0.0, delta[high_comp]).mean()) if high_comp.any() else 0.0

    high_routine = dataset.routine > t.high_routine
    loss = float(np.maximum(0.0, -delta[high_routine]).mean()) if high_routine.any() else 0.0

    return (gain + loss) / dataset.avg_base_wage


def _check_lockstep(state: SimulationState, dataset: OccupationDataset) -> None:
    if state.occupation_ids == dataset.ids:
        if len(state.employment) == len(state.wage) == len(dataset):
            return
        raise DatasetMismatchError("State employment/wage vectors do not match the dataset size")
    for oid in state.occupation_ids:
        try:
            dataset.index_of(oid)
        except UnknownOccupationError:
            raise DatasetMismatchError(f"State occupation {oid!r} has no record in the dataset") from None
    raise DatasetMismatchError(
        f"State tracks {len(state.occupation_ids)} occupations in a different order "
        f"than the dataset's {len(dataset)}"
    )


def build_initial_state(
    dataset: Optional[OccupationDataset] = None, params: Optional[ModelParams] = None
) -> SimulationState:
    """Start-year state: baseline employment and wages, every index at its neutral value."""
    dataset = DEFAULT_DATASET if dataset is None else dataset
    p = DEFAULT_PARAMS if params is None else params

    labor_force = _labor_force(dataset, p)
    total_emp = dataset.total_employment
    unemployment = clamp((labor_force - total_emp) / labor_force, 0.0, 1.0)

    return SimulationState(
        year=p.start_year,
        occupation_ids=dataset.ids,
        employment=tuple(dataset.base_employment.tolist()),
        wage=tuple(dataset.base_wage.tolist()),
        total_employment=total_emp,
        unemployment_rate=unemployment,
        gdp_index=100.0,
        disruption_index=1.0,
        inequality_index=1.0,
        stability_index=100.0,
        event_log=(f"{p.start_year}: Simulation initialized. Adjust sliders to begin.",),
        effective_adoption=0.0,
        base_gdp=dataset.base_gdp,
    )


def step(
    state: SimulationState,
    sliders: Union[SliderInputs, Mapping[str, float]],
    params: Optional[ModelParams] = None,
    dataset: Optional[OccupationDataset] = None,
) -> SimulationState:
    """Advance the economy one year. Never mutates `state`."""
    p = DEFAULT_PARAMS if params is None else params
    dataset = DEFAULT_DATASET if dataset is None else dataset
    s = sliders if isinstance(sliders, SliderInputs) else SliderInputs.from_mapping(sliders, p)
    _check_lockstep(state, dataset)
    variant = get_variant(p.disruption_variant)
    next_year = state.year + 1

    # ============================================================
    # 1. EFFECTIVE ADOPTION
    # ============================================================
    # Transfers cushion households but never speed up deployment
    eff_adopt = effective_adoption(state.pre_transfer_stability, s, p)

    # ============================================================
    # 2. EMPLOYMENT
    # ============================================================
    base_emp = dataset.base_employment
    prev_emp = np.array(state.employment, dtype=float)
    prev_wage = np.array(state.wage, dtype=float)

    retraining_damp = s.retraining * p.retraining_damp_coefficient
    job_loss_rate = np.clip(
        s.ai_capability * eff_adopt
        * dataset.routine * (1 - dataset.social)
        * p.k_substitution
        * (1 - s.labor_protection * p.labor_protection_layoff_damp)
        * (1 - retraining_damp),
        0.0,
        p.max_job_loss_rate,
    )
    emp = np.maximum(base_emp * employment_floor(s, p), prev_emp * (1 - job_loss_rate))

    # ============================================================
    # 3. WAGES
    # ============================================================
    wage_growth = (
        s.ai_capability * dataset.complementarity * p.k_complementarity_wage
        * (1 - s.corporate_concentration * p.concentration_wage_damp)
    )
    emp_ratio = np.divide(emp, base_emp, out=np.ones_like(emp), where=base_emp > 0)
    # Oversupply in shrinking routine occupations pushes wages down
    suppression = dataset.routine * (1 - emp_ratio) * p.k_wage_suppression
    wage = np.maximum(dataset.base_wage * p.wage_floor_ratio, prev_wage * (1 + wage_growth - suppression))

    # ============================================================
    # 4. GDP
    # ============================================================
    wage_bill = float(np.sum(emp * wage))
    displaced_value = float(np.sum(np.maximum(0.0, base_emp - emp) * wage))
    capital_gains = displaced_value * s.ai_capability * p.capital_capture_ratio
    base_gdp = state.base_gdp if state.base_gdp > 0 else dataset.base_gdp
    if base_gdp > 0:
        gdp_index = clamp((wage_bill + capital_gains) / base_gdp * 100, p.gdp_index_min, p.gdp_index_max)
    else:
        gdp_index = state.gdp_index

    # ============================================================
    # 5. UNEMPLOYMENT
    # ============================================================
    labor_force = _labor_force(dataset, p)
    total_emp = float(emp.sum())
    unemployment = clamp((labor_force - total_emp) / labor_force, 0.0, 1.0)
    adj_unemployment = adjusted_unemployment(unemployment, p)

    # ============================================================
    # 6. DISRUPTION INDEX
    # ============================================================
    subset = dataset.mask(variant.selector)
    base_subset = float(base_emp[subset].sum())
    if base_subset > 0:
        shortfall = (base_subset - float(emp[subset].sum())) / base_subset
    else:
        shortfall = 0.0

    resilience = getattr(s, variant.resilience_slider)
    shock = getattr(s, variant.shock_slider)
    # Transition chaos dominates while automation is immature
    chaos = (
        shortfall * p.k_disruption_from_shortfall
        * (1 - s.ai_capability * p.chaos_maturity_damp)
        * (1 - resilience)
    )
    efficiency = s.ai_capability * eff_adopt * p.efficiency_rate
    disruption = clamp(
        state.disruption_index * (1 + chaos) * (1 - efficiency) * (1 + shock * p.k_shock_pass_through),
        p.disruption_index_min,
        p.disruption_index_max,
    )

    # ============================================================
    # 7. INEQUALITY
    # ============================================================
    transfers_damp = 1 - s.transfers * p.transfers_inequality_damp
    divergence = wage_divergence(prev_wage, wage, dataset, p)
    inequality = clamp(
        state.inequality_index
        + divergence * p.k_ineq_from_ai * transfers_damp
        + s.corporate_concentration * p.k_concentration_labor_share * transfers_damp,
        p.inequality_index_min,
        p.inequality_index_max,
    )
    gross_inequality = clamp(
        state.gross_inequality_index
        + divergence * p.k_ineq_from_ai
        + s.corporate_concentration * p.k_concentration_labor_share,
        p.inequality_index_min,
        p.inequality_index_max,
    )

    # ============================================================
    # 8. STABILITY
    # ============================================================
    penalties = stability_penalties(adj_unemployment, disruption, inequality, s.transfers, p)
    stability = clamp(100 - penalties.total, p.stability_min, p.stability_max)
    gross = stability_penalties(adj_unemployment, disruption, gross_inequality, 0.0, p)
    pre_transfer_stability = clamp(100 - gross.total, p.stability_min, p.stability_max)

    logger.debug(
        "%d: eff_adoption=%.4f shortfall=%.4f unemployment=%.4f gdp=%.2f %s=%.4f "
        "inequality=%.4f stability=%.2f",
        next_year, eff_adopt, shortfall, unemployment, gdp_index,
        variant.name, disruption, inequality, stability,
    )

    # ============================================================
    # 9. NARRATIVE
    # ============================================================
    outcome = StepOutcome(
        year=next_year,
        effective_adoption=eff_adopt,
        employment=emp,
        wage=wage,
        prev_wage=prev_wage,
        shortfall=shortfall,
        unemployment_rate=unemployment,
        gdp_index=gdp_index,
        disruption_index=disruption,
        inequality_index=inequality,
        stability_index=stability,
    )
    events = generate_events(outcome, s, p, dataset, variant)

    return SimulationState(
        year=next_year,
        occupation_ids=state.occupation_ids,
        employment=tuple(emp.tolist()),
        wage=tuple(wage.tolist()),
        total_employment=total_emp,
        unemployment_rate=unemployment,
        gdp_index=gdp_index,
        disruption_index=disruption,
        inequality_index=inequality,
        stability_index=stability,
        event_log=state.event_log + tuple(events),
        effective_adoption=eff_adopt,
        pre_transfer_stability=pre_transfer_stability,
        gross_inequality_index=gross_inequality,
        base_gdp=base_gdp,
    )


def run_simulation(
    sliders: Union[SliderInputs, Mapping[str, float]],
    params: Optional[ModelParams] = None,
    years: Optional[int] = None,
    dataset: Optional[OccupationDataset] = None,
) -> List[SimulationState]:
    """Run `years` steps from the start-year state; returns all `years + 1` states."""
    p = DEFAULT_PARAMS if params is None else params
    dataset = DEFAULT_DATASET if dataset is None else dataset
    years = p.default_years if years is None else years
    if years < 0:
        raise ValueError(f"years must be non-negative, got {years}")
    s = sliders if isinstance(sliders, SliderInputs) else SliderInputs.from_mapping(sliders, p)

    current = build_initial_state(dataset, p)
    history = [current]
    for _ in range(years):
        current = step(current, s, p, dataset)
        history.append(current)

    logger.info(
        "Simulated %d years (%s): unemployment %.1f%% -> %.1f%%, stability %.1f",
        years, p.disruption_variant,
        history[0].unemployment_rate * 100, current.unemployment_rate * 100,
        current.stability_index,
    )
    return history
