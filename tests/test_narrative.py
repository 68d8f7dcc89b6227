"""Tests for the event-log narrative generator."""

import numpy as np
import pytest

from economy_lab.config import ModelParams
from economy_lab.engine import run_simulation
from economy_lab.narrative import (
    STABLE_YEAR_MESSAGES,
    StepOutcome,
    generate_events,
    most_displaced,
    top_wage_gainer,
)
from economy_lab.presets import get_preset
from economy_lab.variants import FOOD_PRICE, TECH_LAYOFF


def make_outcome(dataset, year=2030, **overrides):
    values = dict(
        year=year,
        effective_adoption=0.0,
        employment=dataset.base_employment.copy(),
        wage=dataset.base_wage.copy(),
        prev_wage=dataset.base_wage.copy(),
        shortfall=0.0,
        unemployment_rate=0.08,
        gdp_index=100.0,
        disruption_index=1.0,
        inequality_index=1.0,
        stability_index=92.0,
    )
    values.update(overrides)
    return StepOutcome(**values)


class TestStableYear:

    def test_quiet_run_rotates_fallback_messages(self, quiet_sliders, params):
        history = run_simulation(quiet_sliders, params, 3)

        assert history[1].event_log[1:] == (
            "2026: No major disruptions this year. Gradual AI integration continuing.",
        )
        assert history[2].event_log[-1] == (
            "2027: Moderate conditions. Employment and prices within normal range."
        )
        assert history[3].event_log[-1] == (
            "2028: Economy holding steady. Conditions stable across all indicators."
        )
        # exactly one message per quiet year
        assert len(history[3].event_log) == 4

    def test_fallback_depends_only_on_year(self, dataset, params, quiet_sliders):
        outcome = make_outcome(dataset, year=2031)
        events = generate_events(outcome, quiet_sliders, params, dataset, FOOD_PRICE)
        assert events == [STABLE_YEAR_MESSAGES[0].format(year=2031)]


class TestThresholdEvents:

    def test_ai_boom_first_year(self, params):
        boom = get_preset("AI Boom").sliders
        events = run_simulation(boom, params, 1)[1].event_log[1:]

        assert events[0] == "2026: Heavy automation wave; Stockers & Order Fillers down 14.8% from baseline."
        assert events[1] == (
            "2026: Skilled workers thriving; ML & AI Engineers wages up 7.0% this year from AI leverage."
        )
        assert events[2] == "2026: Food prices rising; logistics workforce down 14% from baseline."
        assert not any("Energy" in e for e in events)

    def test_events_fire_in_priority_order(self, dataset, params, quiet_sliders):
        outcome = make_outcome(
            dataset,
            shortfall=0.2,
            unemployment_rate=0.25,
            inequality_index=2.5,
            stability_index=20.0,
            gdp_index=140.0,
        )
        events = generate_events(outcome, quiet_sliders, params, dataset, FOOD_PRICE)

        assert events == [
            "2030: Severe logistics shortfall (20% below baseline) pushing food prices higher.",
            "2030: Unemployment crisis; 25.0% of the workforce displaced.",
            "2030: Severe inequality (index 2.50); top earners capturing most AI gains.",
            "2030: CRITICAL: Social stability collapsing (20/100).",
            "2030: GDP index surging to 140.0; productivity gains outpacing displacement.",
        ]

    def test_energy_spike(self, dataset, params, quiet_sliders):
        outcome = make_outcome(dataset)
        sliders = quiet_sliders.with_values(energy_cost=0.3)
        events = generate_events(outcome, sliders, params, dataset, FOOD_PRICE)
        assert events == ["2030: Energy cost spike (+30%) adding 3.0% to food prices."]

    def test_shock_relief(self, dataset, params, quiet_sliders):
        outcome = make_outcome(dataset)
        sliders = quiet_sliders.with_values(open_source_access=-0.3)
        events = generate_events(outcome, sliders, params, dataset, TECH_LAYOFF)
        assert events == ["2030: Restricted model access slowing tech layoffs."]

    def test_tech_variant_wording(self, dataset, params, quiet_sliders):
        outcome = make_outcome(dataset, shortfall=0.08)
        events = generate_events(outcome, quiet_sliders, params, dataset, TECH_LAYOFF)
        assert events == [
            "2030: Tech layoffs spreading; infrastructure workforce down 8% from baseline."
        ]

    @pytest.mark.parametrize(
        "rate, expected",
        [
            (0.13, "2030: Unemployment elevated at 13.0%, above structural baseline."),
            (0.17, "2030: Unemployment surging to 17.0%, straining social systems."),
        ],
    )
    def test_unemployment_levels(self, dataset, params, quiet_sliders, rate, expected):
        outcome = make_outcome(dataset, unemployment_rate=rate)
        assert generate_events(outcome, quiet_sliders, params, dataset, FOOD_PRICE) == [expected]

    def test_policy_levers(self, dataset, params, quiet_sliders):
        sliders = quiet_sliders.with_values(
            ai_capability=0.35, regulation=0.8, retraining=0.6, transfers=0.6
        )
        outcome = make_outcome(dataset)
        events = generate_events(outcome, sliders, params, dataset, FOOD_PRICE)
        assert events == [
            "2030: Strong AI regulation constraining adoption rate this year.",
            "2030: Active retraining programs cushioning displacement for some workers.",
            "2030: Social transfers helping stabilize household incomes amid disruption.",
        ]

    def test_wage_message_skipped_without_gain(self, dataset, params, quiet_sliders):
        sliders = quiet_sliders.with_values(ai_capability=0.5)
        outcome = make_outcome(dataset)
        events = generate_events(outcome, sliders, params, dataset, FOOD_PRICE)
        assert not any("Wages" in e or "wages" in e for e in events)

    def test_custom_thresholds(self, dataset, quiet_sliders):
        from economy_lab.config import NarrativeThresholds

        params = ModelParams(narrative=NarrativeThresholds(gdp_surge=105.0))
        outcome = make_outcome(dataset, gdp_index=110.0)
        events = generate_events(outcome, quiet_sliders, params, dataset, FOOD_PRICE)
        assert events == ["2030: GDP index surging to 110.0; productivity gains outpacing displacement."]


class TestHelpers:

    def test_most_displaced_none_when_no_loss(self, dataset):
        assert most_displaced(dataset.base_employment.copy(), dataset) == (None, 0.0)

    def test_most_displaced_picks_largest_absolute_loss(self, dataset):
        emp = dataset.base_employment.copy()
        emp[dataset.index_of("cashiers")] -= 100
        emp[dataset.index_of("data_entry")] -= 50
        assert most_displaced(emp, dataset) == (dataset.index_of("cashiers"), 100.0)

    def test_top_wage_gainer_first_wins_ties(self):
        prev = np.array([10.0, 10.0, 10.0])
        wage = np.array([10.0, 12.0, 12.0])
        assert top_wage_gainer(wage, prev) == (1, 2.0)

    def test_top_wage_gainer_none_when_all_fall(self):
        assert top_wage_gainer(np.array([9.0, 8.0]), np.array([10.0, 10.0])) == (None, 0.0)
