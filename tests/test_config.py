"""Tests for parameter loading, slider inputs and the occupation roster."""

from pathlib import Path

import pytest

from economy_lab.config import (
    DEFAULT_SLIDERS,
    ModelParams,
    SliderInputs,
    default_sliders,
    load_params,
    params_from_mapping,
    year_labels,
)
from economy_lab.errors import ConfigError, EconomyLabError, UnknownOccupationError
from economy_lab.occupations import (
    BASE_LABOR_FORCE,
    DEFAULT_DATASET,
    DEFAULT_OCCUPATIONS,
    Occupation,
    OccupationDataset,
    dataset_from_records,
    load_dataset,
)
from economy_lab.variants import VARIANTS, get_variant

CONFIG_DIR = Path(__file__).resolve().parents[1] / "configs"


class TestLoadParams:

    def test_defaults_without_file(self):
        assert load_params() == ModelParams()

    def test_yaml_overrides(self, tmp_path):
        path = tmp_path / "params.yaml"
        path.write_text("k_substitution: 0.5\nstart_year: 2030\nlabor_force: 50000000\n")

        params = load_params(path)

        assert params.k_substitution == 0.5
        assert params.start_year == 2030
        assert params.labor_force == 50_000_000.0
        assert params.k_regulation_drag == ModelParams().k_regulation_drag

    def test_keyword_overrides_win(self, tmp_path):
        path = tmp_path / "params.yaml"
        path.write_text("k_substitution: 0.5\n")
        assert load_params(path, k_substitution=0.2).k_substitution == 0.2

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_params(path) == ModelParams()

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_params(path)

    def test_bundled_tech_layoff_config(self):
        params = load_params(CONFIG_DIR / "tech_layoff.yaml")

        assert params.disruption_variant == "tech_layoff"
        assert params.k_disruption_from_shortfall == 0.8
        assert params.sliders["open_source_access"].default == 0.1
        assert params.sliders["open_source_access"].min == DEFAULT_SLIDERS["open_source_access"].min
        assert params.narrative.shortfall_moderate == 0.04
        assert params.narrative.shortfall_severe == 0.15
        assert default_sliders(params).talent_pipeline_strength == 0.6


class TestValidation:

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="warp_factor"):
            params_from_mapping({"warp_factor": 9})

    def test_unknown_variant(self):
        with pytest.raises(ConfigError, match="housing"):
            params_from_mapping({"disruption_variant": "housing"})

    @pytest.mark.parametrize(
        "raw",
        [
            {"k_substitution": "fast"},
            {"k_substitution": True},
            {"start_year": 2025.5},
            {"default_years": "10"},
            {"disruption_variant": 1},
        ],
    )
    def test_wrong_types(self, raw):
        with pytest.raises(ConfigError):
            params_from_mapping(raw)

    def test_inverted_bounds(self):
        with pytest.raises(ConfigError, match="gdp_index_min"):
            ModelParams(gdp_index_min=250.0)

    def test_non_positive_threshold(self):
        with pytest.raises(ConfigError):
            ModelParams(slowdown_threshold=0.0)

    def test_non_positive_labor_force(self):
        with pytest.raises(ConfigError):
            params_from_mapping({"labor_force": 0})

    def test_slider_default_outside_range(self):
        with pytest.raises(ConfigError, match="inconsistent"):
            params_from_mapping({"sliders": {"regulation": {"default": 2.0}}})

    def test_new_slider_needs_full_metadata(self):
        with pytest.raises(ConfigError):
            params_from_mapping({"sliders": {"warp_speed": {"default": 0.1}}})

    def test_every_slider_needs_metadata(self):
        with pytest.raises(ConfigError, match="Missing slider metadata"):
            ModelParams(sliders={})
        partial = {k: v for k, v in DEFAULT_SLIDERS.items() if k != "transfers"}
        with pytest.raises(ConfigError, match="transfers"):
            ModelParams(sliders=partial)

    def test_unknown_narrative_threshold(self):
        with pytest.raises(ConfigError, match="nonsense"):
            params_from_mapping({"narrative": {"nonsense": 1.0}})

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)
        assert issubclass(ConfigError, EconomyLabError)


class TestSliderInputs:

    def test_defaults_match_metadata(self):
        sliders = default_sliders()
        for name, spec in DEFAULT_SLIDERS.items():
            assert getattr(sliders, name) == spec.default

    def test_from_mapping_fills_gaps(self):
        sliders = SliderInputs.from_mapping({"ai_capability": 0.9})
        assert sliders.ai_capability == 0.9
        assert sliders.regulation == DEFAULT_SLIDERS["regulation"].default

    def test_from_mapping_rejects_unknown(self):
        with pytest.raises(ConfigError, match="turbo"):
            SliderInputs.from_mapping({"turbo": 1.0})

    @pytest.mark.parametrize("value", ["high", None, True])
    def test_from_mapping_rejects_non_numbers(self, value):
        with pytest.raises(ConfigError):
            SliderInputs.from_mapping({"regulation": value})

    def test_with_values_is_a_copy(self, sliders):
        changed = sliders.with_values(transfers=0.9)
        assert changed.transfers == 0.9
        assert sliders.transfers == DEFAULT_SLIDERS["transfers"].default

    def test_as_dict_round_trip(self, sliders):
        assert SliderInputs.from_mapping(sliders.as_dict()) == sliders


class TestYearLabels:

    def test_labels(self):
        assert year_labels(3) == ["2025", "2026", "2027", "2028"]
        assert year_labels(0, 2030) == ["2030"]


class TestOccupations:

    def test_default_roster(self):
        assert len(DEFAULT_DATASET) == 25
        assert DEFAULT_DATASET.total_employment == 44_845_000
        assert DEFAULT_DATASET.labor_force == BASE_LABOR_FORCE
        assert DEFAULT_DATASET.avg_base_wage == pytest.approx(69_000)

    def test_subset_masks(self):
        logistics = [o.id for o, m in zip(DEFAULT_DATASET, DEFAULT_DATASET.mask(VARIANTS["food_price"].selector)) if m]
        infra = [o.id for o, m in zip(DEFAULT_DATASET, DEFAULT_DATASET.mask(VARIANTS["tech_layoff"].selector)) if m]

        assert logistics == ["stockers", "laborers", "truck_drivers"]
        assert infra == ["it_support", "cybersecurity", "network_admins", "systems_analysts"]
        assert DEFAULT_DATASET.baseline_employment_of(VARIANTS["food_price"].selector) == 7_700_000

    def test_mask_is_cached_and_read_only(self):
        selector = get_variant("food_price").selector
        mask = DEFAULT_DATASET.mask(selector)
        assert DEFAULT_DATASET.mask(selector) is mask
        with pytest.raises(ValueError):
            mask[0] = True

    def test_lookup(self):
        assert DEFAULT_DATASET["ml_engineers"].mean_wage == 145_000
        assert DEFAULT_DATASET.index_of("home_health_aides") == 0
        with pytest.raises(UnknownOccupationError):
            DEFAULT_DATASET["astronauts"]
        assert issubclass(UnknownOccupationError, KeyError)

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ConfigError, match="Duplicate"):
            OccupationDataset([DEFAULT_OCCUPATIONS[0], DEFAULT_OCCUPATIONS[0]])

    def test_score_out_of_range_rejected(self):
        bad = Occupation("x", "X", 10, 10, 1.5, 0.5, 0.5, 0.5, 0.5, "Other")
        with pytest.raises(ConfigError, match="routine_score"):
            OccupationDataset([bad])

    def test_non_positive_labor_force_rejected(self):
        with pytest.raises(ConfigError):
            OccupationDataset(DEFAULT_OCCUPATIONS, 0)

    def test_load_dataset(self, tmp_path):
        path = tmp_path / "roster.yaml"
        path.write_text(
            "labor_force: 1000\n"
            "occupations:\n"
            "  - id: welders\n"
            "    name: Welders\n"
            "    employment: 400\n"
            "    mean_wage: 50000\n"
            "    routine_score: 0.5\n"
            "    analytical_score: 0.3\n"
            "    social_score: 0.2\n"
            "    manual_score: 0.9\n"
            "    complementarity_score: 0.3\n"
            "    sector: Manufacturing\n"
            "    is_logistics: true\n"
        )
        dataset = load_dataset(path)

        assert dataset.ids == ("welders",)
        assert dataset.labor_force == 1000
        assert dataset["welders"].is_logistics

    def test_load_dataset_requires_occupations(self, tmp_path):
        path = tmp_path / "roster.yaml"
        path.write_text("labor_force: 1000\n")
        with pytest.raises(ConfigError, match="occupations"):
            load_dataset(path)

    def test_bad_record(self):
        with pytest.raises(ConfigError, match="welders"):
            dataset_from_records([{"id": "welders", "name": "Welders"}], 1000)
