"""Tabular views of a simulation history for charts, tables and exports."""

from typing import List, Optional, Sequence

import pandas as pd

from .config import DEFAULT_PARAMS, ModelParams, SliderInputs
from .engine import SimulationState, StabilityPenalties, adjusted_unemployment, stability_penalties
from .occupations import DEFAULT_DATASET, OccupationDataset

HEADLINE_COLUMNS = [
    "year",
    "total_employment",
    "unemployment_rate",
    "gdp_index",
    "disruption_index",
    "inequality_index",
    "stability_index",
    "effective_adoption",
]


def stability_label(value: float) -> str:
    if value >= 70:
        return "Stable"
    if value >= 45:
        return "Strained"
    if value >= 25:
        return "Unstable"
    return "Critical"


def history_frame(history: Sequence[SimulationState]) -> pd.DataFrame:
    """One row per simulated year with every headline series."""
    rows = [{col: getattr(state, col) for col in HEADLINE_COLUMNS} for state in history]
    df = pd.DataFrame(rows, columns=HEADLINE_COLUMNS)
    df["stability_label"] = df["stability_index"].map(stability_label)
    return df.set_index("year")


def employment_frame(
    history: Sequence[SimulationState], dataset: Optional[OccupationDataset] = None
) -> pd.DataFrame:
    """Employment by occupation (columns, display names) and year (rows)."""
    dataset = DEFAULT_DATASET if dataset is None else dataset
    names = [dataset[oid].name for oid in history[0].occupation_ids]
    return pd.DataFrame(
        [state.employment for state in history],
        index=pd.Index([state.year for state in history], name="year"),
        columns=names,
    )


def wage_frame(
    history: Sequence[SimulationState], dataset: Optional[OccupationDataset] = None
) -> pd.DataFrame:
    dataset = DEFAULT_DATASET if dataset is None else dataset
    names = [dataset[oid].name for oid in history[0].occupation_ids]
    return pd.DataFrame(
        [state.wage for state in history],
        index=pd.Index([state.year for state in history], name="year"),
        columns=names,
    )


def occupation_frame(state: SimulationState, dataset: Optional[OccupationDataset] = None) -> pd.DataFrame:
    """Raw per-occupation detail for one year: baseline vs current employment and wage."""
    dataset = DEFAULT_DATASET if dataset is None else dataset
    rows = []
    for oid, emp, wage in zip(state.occupation_ids, state.employment, state.wage):
        occ = dataset[oid]
        change = (emp / occ.employment - 1) * 100 if occ.employment > 0 else 0.0
        rows.append({
            "id": oid,
            "occupation": occ.name,
            "sector": occ.sector,
            "baseline_employment": occ.employment,
            "employment": emp,
            "employment_change_pct": change,
            "baseline_wage": occ.mean_wage,
            "wage": wage,
        })
    return pd.DataFrame(rows).set_index("id")


def stability_frame(
    history: Sequence[SimulationState],
    sliders: SliderInputs,
    params: Optional[ModelParams] = None,
) -> pd.DataFrame:
    """Per-year breakdown of the points each component deducts from stability."""
    p = DEFAULT_PARAMS if params is None else params
    rows: List[dict] = []
    for state in history:
        if state.year == p.start_year:
            # The start year is not stepped; its stability is 100 by construction
            pen = StabilityPenalties(0.0, 0.0, 0.0)
        else:
            pen = stability_penalties(
                adjusted_unemployment(state.unemployment_rate, p),
                state.disruption_index,
                state.inequality_index,
                sliders.transfers,
                p,
            )
        rows.append({
            "year": state.year,
            "unemployment_penalty": pen.unemployment,
            "disruption_penalty": pen.disruption,
            "inequality_penalty": pen.inequality,
            "stability_index": state.stability_index,
        })
    return pd.DataFrame(rows).set_index("year")
