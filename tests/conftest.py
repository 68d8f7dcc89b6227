"""Pytest configuration and fixtures for economy_lab tests."""

import pytest

from economy_lab.config import ModelParams, SliderInputs, default_sliders
from economy_lab.engine import run_simulation
from economy_lab.occupations import DEFAULT_DATASET


@pytest.fixture
def params() -> ModelParams:
    return ModelParams()


@pytest.fixture
def dataset():
    return DEFAULT_DATASET


@pytest.fixture
def sliders(params) -> SliderInputs:
    """Every lever at its declared default."""
    return default_sliders(params)


@pytest.fixture
def quiet_sliders() -> SliderInputs:
    """No AI and no policy: nothing should happen."""
    return SliderInputs(
        ai_capability=0.0,
        adoption_speed=0.0,
        regulation=0.0,
        retraining=0.0,
        transfers=0.0,
        labor_protection=0.0,
        corporate_concentration=0.0,
        energy_cost=0.0,
        supply_chain_resilience=0.0,
        open_source_access=0.0,
        talent_pipeline_strength=0.0,
    )


@pytest.fixture
def baseline_history(sliders, params):
    """A default ten-year run."""
    return run_simulation(sliders, params, 10)
