"""
Disruption-index variants.

The engine tracks one secondary index driven by the employment shortfall of a
displacement-sensitive subset of occupations. Which subset, which exogenous
shock slider and which resilience slider feed it, and how the resulting
events read, is selected here; the arithmetic is shared.
"""

from dataclasses import dataclass
from operator import attrgetter
from typing import Callable, Dict

from .errors import ConfigError
from .occupations import Occupation


@dataclass(frozen=True)
class DisruptionVariant:
    """Subset selector, driver sliders and event wording for one disruption index."""

    name: str
    index_label: str
    category: str
    selector: Callable[[Occupation], bool]
    shock_slider: str
    resilience_slider: str
    # Templates take {year}, {pct}, {shock_pct} and {pass_through_pct}
    severe_shortfall: str
    moderate_shortfall: str
    severe_shock: str
    moderate_shock: str
    shock_relief: str


FOOD_PRICE = DisruptionVariant(
    name="food_price",
    index_label="Food Price Index",
    category="logistics",
    selector=attrgetter("is_logistics"),
    shock_slider="energy_cost",
    resilience_slider="supply_chain_resilience",
    severe_shortfall="{year}: Severe logistics shortfall ({pct:.0f}% below baseline) pushing food prices higher.",
    moderate_shortfall="{year}: Food prices rising; logistics workforce down {pct:.0f}% from baseline.",
    severe_shock="{year}: Energy cost spike (+{shock_pct:.0f}%) adding {pass_through_pct:.1f}% to food prices.",
    moderate_shock="{year}: Energy cost pressure passed through to food prices (+{pass_through_pct:.1f}%).",
    shock_relief="{year}: Falling energy costs easing food price pressure.",
)

TECH_LAYOFF = DisruptionVariant(
    name="tech_layoff",
    index_label="Tech Layoff Index",
    category="infrastructure",
    selector=attrgetter("is_infrastructure"),
    shock_slider="open_source_access",
    resilience_slider="talent_pipeline_strength",
    severe_shortfall="{year}: Infrastructure teams gutted ({pct:.0f}% below baseline); tech layoffs cascading.",
    moderate_shortfall="{year}: Tech layoffs spreading; infrastructure workforce down {pct:.0f}% from baseline.",
    severe_shock="{year}: Open-source AI surge (+{shock_pct:.0f}%) adding {pass_through_pct:.1f}% to tech churn.",
    moderate_shock="{year}: Freely available models accelerating tech churn (+{pass_through_pct:.1f}%).",
    shock_relief="{year}: Restricted model access slowing tech layoffs.",
)

VARIANTS: Dict[str, DisruptionVariant] = {
    FOOD_PRICE.name: FOOD_PRICE,
    TECH_LAYOFF.name: TECH_LAYOFF,
}


def get_variant(name: str) -> DisruptionVariant:
    try:
        return VARIANTS[name]
    except KeyError:
        raise ConfigError(
            f"Unknown disruption variant {name!r}; expected one of {sorted(VARIANTS)}"
        ) from None
