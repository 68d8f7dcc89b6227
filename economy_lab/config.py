"""
Configuration for the AI Economy Lab.

Defines the policy sliders, the model coefficients and clamp bounds, and the
narrative thresholds. Dataclass defaults are the reference calibration; YAML
files can override any of them through `load_params`, which validates the
whole bundle once at the boundary so the step function never has to.

None of these numbers are estimated from data. They are chosen so that the
default sliders produce a slow, visible drift rather than a collapse.
"""

from dataclasses import dataclass, field, fields, asdict, replace
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import ConfigError
from .variants import VARIANTS


@dataclass(frozen=True)
class SliderSpec:
    """Display and range metadata for one policy lever."""

    label: str
    min: float
    max: float
    step: float
    default: float
    tooltip: str = ""


DEFAULT_SLIDERS: Dict[str, SliderSpec] = {
    "ai_capability": SliderSpec(
        "AI Capability", 0.0, 1.0, 0.05, 0.3,
        "How powerful deployed AI systems are (0 = none, 1 = frontier everywhere)",
    ),
    "adoption_speed": SliderSpec(
        "Adoption Speed", 0.0, 1.0, 0.05, 0.4,
        "How fast firms deploy the AI that exists",
    ),
    "regulation": SliderSpec(
        "Regulation", 0.0, 1.0, 0.05, 0.3,
        "Government oversight of AI deployment; drags on adoption",
    ),
    "retraining": SliderSpec(
        "Retraining Programs", 0.0, 1.0, 0.05, 0.2,
        "Worker transition investment; slows layoffs and raises the employment floor",
    ),
    "transfers": SliderSpec(
        "Social Transfers", 0.0, 1.0, 0.05, 0.2,
        "UBI-style payments; compress inequality and buffer price shocks",
    ),
    "labor_protection": SliderSpec(
        "Labor Protections", 0.0, 1.0, 0.05, 0.3,
        "Legal barriers to layoffs",
    ),
    "corporate_concentration": SliderSpec(
        "Corporate Concentration", 0.0, 1.0, 0.05, 0.4,
        "Market power of large firms; captures AI gains and suppresses raises",
    ),
    "energy_cost": SliderSpec(
        "Energy Cost Shock", -0.5, 0.5, 0.05, 0.0,
        "-0.5 = cheap energy, +0.5 = expensive; passes through to food prices",
    ),
    "supply_chain_resilience": SliderSpec(
        "Supply Chain Resilience", 0.0, 1.0, 0.05, 0.5,
        "Robustness of logistics networks to workforce shortfalls",
    ),
    "open_source_access": SliderSpec(
        "Open-Source AI Access", -0.5, 0.5, 0.05, 0.0,
        "-0.5 = locked-down models, +0.5 = freely available; accelerates tech churn",
    ),
    "talent_pipeline_strength": SliderSpec(
        "Talent Pipeline Strength", 0.0, 1.0, 0.05, 0.5,
        "Supply of workers able to move into infrastructure roles",
    ),
}


@dataclass(frozen=True)
class SliderInputs:
    """One value per policy lever. Ranges are the caller's responsibility."""

    ai_capability: float
    adoption_speed: float
    regulation: float
    retraining: float
    transfers: float
    labor_protection: float
    corporate_concentration: float
    energy_cost: float = 0.0
    supply_chain_resilience: float = 0.5
    open_source_access: float = 0.0
    talent_pipeline_strength: float = 0.5

    @classmethod
    def from_mapping(
        cls, values: Mapping[str, float], params: Optional["ModelParams"] = None
    ) -> "SliderInputs":
        """Build inputs from a key -> value mapping, filling gaps from declared defaults."""
        specs = (params or DEFAULT_PARAMS).sliders
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ConfigError(f"Unknown slider(s): {', '.join(sorted(unknown))}")
        merged = {}
        for name in known:
            if name in values:
                val = values[name]
                if isinstance(val, bool) or not isinstance(val, (int, float)):
                    raise ConfigError(f"Slider '{name}' must be a number, got {type(val).__name__}")
                merged[name] = float(val)
            else:
                merged[name] = float(specs[name].default)
        return cls(**merged)

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    def with_values(self, **changes: float) -> "SliderInputs":
        return replace(self, **changes)


@dataclass(frozen=True)
class NarrativeThresholds:
    """Cut-offs that decide which events the narrative generator reports."""

    automation_capability: float = 0.3
    automation_adoption: float = 0.2
    automation_accelerating_capability: float = 0.5
    automation_heavy_capability: float = 0.7
    wage_message_capability: float = 0.4
    wage_thriving_capability: float = 0.7
    shortfall_moderate: float = 0.05
    shortfall_severe: float = 0.15
    shock_moderate: float = 0.1
    shock_severe: float = 0.2
    shock_relief: float = -0.1
    unemployment_elevated: float = 0.12
    unemployment_surging: float = 0.15
    unemployment_crisis: float = 0.20
    inequality_rising: float = 1.4
    inequality_severe: float = 2.0
    regulation_friction: float = 0.6
    regulation_strong: float = 0.7
    retraining_active: float = 0.5
    retraining_capability: float = 0.3
    transfers_active: float = 0.5
    stability_stress: float = 65.0
    stability_warning: float = 50.0
    stability_critical: float = 30.0
    gdp_surge: float = 130.0
    gdp_contraction: float = 80.0
    # Group membership for the wage-divergence term and event wording
    high_complementarity: float = 0.7
    high_routine: float = 0.7


@dataclass(frozen=True)
class ModelParams:
    """All coefficients, clamp bounds and metadata the engine reads."""

    # --- Horizon ---
    start_year: int = 2025
    default_years: int = 10
    disruption_variant: str = "food_price"  # or "tech_layoff"
    labor_force: Optional[float] = None  # None = use the dataset's labor force

    # --- Effective adoption ---
    k_regulation_drag: float = 0.6
    slowdown_max: float = 0.5
    slowdown_threshold: float = 50.0  # stability below this throttles adoption
    stability_adoption_min_multiplier: float = 0.5
    stability_adoption_max_multiplier: float = 1.0

    # --- Employment ---
    k_substitution: float = 0.4
    labor_protection_layoff_damp: float = 0.5
    retraining_damp_coefficient: float = 0.3
    max_job_loss_rate: float = 0.5
    employment_floor_ratio: float = 0.6
    retraining_floor_boost: float = 0.1  # floor rises to 0.7 at full retraining

    # --- Wages ---
    k_complementarity_wage: float = 0.1
    concentration_wage_damp: float = 0.2
    k_wage_suppression: float = 0.5
    wage_floor_ratio: float = 0.5

    # --- GDP ---
    capital_capture_ratio: float = 0.6  # share of automated output kept as profit
    gdp_index_min: float = 50.0
    gdp_index_max: float = 200.0

    # --- Unemployment ---
    structural_unemployment: float = 0.08
    k_demand_feedback: float = 0.3

    # --- Disruption index ---
    k_disruption_from_shortfall: float = 0.5
    chaos_maturity_damp: float = 0.7
    efficiency_rate: float = 0.02
    k_shock_pass_through: float = 0.1
    disruption_index_min: float = 0.5
    disruption_index_max: float = 3.0

    # --- Inequality ---
    k_ineq_from_ai: float = 1.0
    k_concentration_labor_share: float = 0.02
    transfers_inequality_damp: float = 0.4
    inequality_index_min: float = 0.5
    inequality_index_max: float = 3.0

    # --- Stability ---
    stability_weight_unemployment: float = 1.0
    stability_weight_disruption: float = 0.5
    stability_weight_inequality: float = 20.0
    transfers_disruption_buffer: float = 0.35
    stability_min: float = 0.0
    stability_max: float = 100.0

    sliders: Dict[str, SliderSpec] = field(default_factory=lambda: dict(DEFAULT_SLIDERS))
    narrative: NarrativeThresholds = field(default_factory=NarrativeThresholds)

    def __post_init__(self):
        if self.disruption_variant not in VARIANTS:
            raise ConfigError(
                f"Unknown disruption_variant {self.disruption_variant!r}; "
                f"expected one of {sorted(VARIANTS)}"
            )
        for lo, hi in _BOUNDS:
            if getattr(self, lo) > getattr(self, hi):
                raise ConfigError(f"{lo} must not exceed {hi}")
        if self.slowdown_threshold <= 0:
            raise ConfigError("slowdown_threshold must be positive")
        if self.labor_force is not None and self.labor_force <= 0:
            raise ConfigError("labor_force must be positive")
        slider_fields = {f.name for f in fields(SliderInputs)}
        for name, spec in self.sliders.items():
            if name not in slider_fields:
                raise ConfigError(f"Slider metadata for unknown slider '{name}'")
            if spec.min > spec.max or not spec.min <= spec.default <= spec.max:
                raise ConfigError(f"Slider '{name}' has inconsistent min/max/default")
        missing = slider_fields - set(self.sliders)
        if missing:
            raise ConfigError(f"Missing slider metadata for: {', '.join(sorted(missing))}")


_BOUNDS = [
    ("stability_adoption_min_multiplier", "stability_adoption_max_multiplier"),
    ("gdp_index_min", "gdp_index_max"),
    ("disruption_index_min", "disruption_index_max"),
    ("inequality_index_min", "inequality_index_max"),
    ("stability_min", "stability_max"),
]

_INT_FIELDS = {"start_year", "default_years"}
_STR_FIELDS = {"disruption_variant"}
_OPTIONAL_FIELDS = {"labor_force"}
_BLOCK_FIELDS = {"sliders", "narrative"}

DEFAULT_PARAMS = ModelParams()


def default_sliders(params: Optional[ModelParams] = None) -> SliderInputs:
    """Slider inputs at every declared default."""
    return SliderInputs.from_mapping({}, params or DEFAULT_PARAMS)


def _is_number(val: Any) -> bool:
    return isinstance(val, (int, float)) and not isinstance(val, bool)


def _check_scalar(key: str, val: Any) -> Any:
    if key in _INT_FIELDS:
        if not isinstance(val, int) or isinstance(val, bool):
            raise ConfigError(f"Config parameter '{key}' must be int, got {type(val).__name__}")
        return val
    if key in _STR_FIELDS:
        if not isinstance(val, str):
            raise ConfigError(f"Config parameter '{key}' must be str, got {type(val).__name__}")
        return val
    if key in _OPTIONAL_FIELDS and val is None:
        return None
    if not _is_number(val):
        raise ConfigError(f"Config parameter '{key}' must be float, got {type(val).__name__}")
    return float(val)


def _parse_sliders(raw: Any) -> Dict[str, SliderSpec]:
    if not isinstance(raw, dict):
        raise ConfigError("'sliders' must be a mapping of slider name to metadata")
    specs = dict(DEFAULT_SLIDERS)
    spec_fields = {f.name for f in fields(SliderSpec)}
    for name, meta in raw.items():
        if not isinstance(meta, dict):
            raise ConfigError(f"Slider '{name}' metadata must be a mapping")
        unknown = set(meta) - spec_fields
        if unknown:
            raise ConfigError(f"Slider '{name}' has unknown field(s): {', '.join(sorted(unknown))}")
        base = asdict(specs[name]) if name in specs else {}
        base.update(meta)
        missing = spec_fields - set(base) - {"tooltip"}
        if missing:
            raise ConfigError(f"Slider '{name}' is missing: {', '.join(sorted(missing))}")
        for key in ("min", "max", "step", "default"):
            if not _is_number(base[key]):
                raise ConfigError(f"Slider '{name}' field '{key}' must be a number")
        specs[name] = SliderSpec(**base)
    return specs


def _parse_narrative(raw: Any) -> NarrativeThresholds:
    if not isinstance(raw, dict):
        raise ConfigError("'narrative' must be a mapping of threshold name to value")
    known = {f.name for f in fields(NarrativeThresholds)}
    unknown = set(raw) - known
    if unknown:
        raise ConfigError(f"Unknown narrative threshold(s): {', '.join(sorted(unknown))}")
    for key, val in raw.items():
        if not _is_number(val):
            raise ConfigError(f"Narrative threshold '{key}' must be a number")
    return NarrativeThresholds(**{k: float(v) for k, v in raw.items()})


def params_from_mapping(raw: Mapping[str, Any]) -> ModelParams:
    """Validate a plain mapping and merge it onto the default parameters."""
    known = {f.name for f in fields(ModelParams)}
    unknown = set(raw) - known
    if unknown:
        raise ConfigError(f"Unknown config parameter(s): {', '.join(sorted(unknown))}")

    kwargs: Dict[str, Any] = {}
    for key, val in raw.items():
        if key == "sliders":
            kwargs[key] = _parse_sliders(val)
        elif key == "narrative":
            kwargs[key] = _parse_narrative(val)
        else:
            kwargs[key] = _check_scalar(key, val)
    return ModelParams(**kwargs)


def load_params(path=None, **overrides: Any) -> ModelParams:
    """
    Load model parameters from a YAML file.

    Keys in the file (and keyword overrides, which win) replace the dataclass
    defaults. Unknown keys and wrongly-typed values raise ConfigError.
    """
    raw: Dict[str, Any] = {}
    if path is not None:
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Parameter file {path} must contain a mapping")
        raw.update(loaded)
    raw.update(overrides)
    return params_from_mapping(raw)


def year_labels(years: int, start_year: int = 2025) -> List[str]:
    """Generate labels like '2025', '2026', ... for a run of `years` steps."""
    return [str(start_year + y) for y in range(years + 1)]
