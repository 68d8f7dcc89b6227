"""
Tracked occupations for the AI Economy Lab.

The roster is static: it is loaded once, validated once, and then used as a
read-only arena by the engine. States refer to occupations by their position
in the dataset, so per-step lookups never search by id.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Tuple

import numpy as np
import yaml

from .errors import ConfigError, UnknownOccupationError

SCORE_FIELDS = (
    "routine_score",
    "analytical_score",
    "social_score",
    "manual_score",
    "complementarity_score",
)


@dataclass(frozen=True)
class Occupation:
    """A tracked occupation with structural AI-exposure scores."""

    id: str
    name: str
    employment: float
    mean_wage: float  # $/year
    routine_score: float  # 0-1, how scripted the work is
    analytical_score: float
    social_score: float  # 0-1, interpersonal demand; shields against substitution
    manual_score: float
    complementarity_score: float  # 0-1, how much AI amplifies rather than replaces
    sector: str
    is_logistics: bool = False
    is_infrastructure: bool = False

    @property
    def wage_bill(self) -> float:
        return self.employment * self.mean_wage


# BLS OES-style roster: 15 broad occupations plus 10 tech/knowledge roles.
# Tracked employment is 44,845,000.
DEFAULT_OCCUPATIONS: List[Occupation] = [
    Occupation("home_health_aides", "Home Health & Personal Care Aides", 4_000_000, 32_000,
               0.40, 0.20, 0.90, 0.70, 0.30, "Healthcare"),
    Occupation("retail_sales", "Retail Salespersons", 3_700_000, 35_000,
               0.70, 0.30, 0.60, 0.40, 0.20, "Retail"),
    Occupation("fast_food", "Fast Food & Counter Workers", 3_500_000, 28_000,
               0.80, 0.20, 0.50, 0.60, 0.10, "Food"),
    Occupation("general_managers", "General & Operations Managers", 3_000_000, 110_000,
               0.30, 0.80, 0.80, 0.10, 0.80, "Management"),
    # Highly situational work; AI diagnostics augment rather than replace
    Occupation("registered_nurses", "Registered Nurses", 3_100_000, 85_000,
               0.20, 0.70, 0.90, 0.50, 0.80, "Healthcare"),
    Occupation("cashiers", "Cashiers", 3_300_000, 30_000,
               0.90, 0.20, 0.50, 0.40, 0.10, "Retail"),
    Occupation("stockers", "Stockers & Order Fillers", 2_900_000, 34_000,
               0.80, 0.30, 0.30, 0.80, 0.20, "Retail", is_logistics=True),
    Occupation("office_clerks", "General Office Clerks", 2_800_000, 42_000,
               0.85, 0.40, 0.40, 0.20, 0.30, "Administrative"),
    # Modern CSR work is heavily scripted
    Occupation("customer_service", "Customer Service Representatives", 2_700_000, 39_000,
               0.85, 0.40, 0.70, 0.10, 0.40, "Services"),
    Occupation("laborers", "Laborers & Freight Movers", 2_600_000, 36_000,
               0.70, 0.20, 0.20, 0.90, 0.20, "Logistics", is_logistics=True),
    Occupation("truck_drivers", "Heavy & Tractor-Trailer Truck Drivers", 2_200_000, 55_000,
               0.55, 0.30, 0.20, 0.80, 0.30, "Logistics", is_logistics=True),
    Occupation("teachers", "Elementary School Teachers", 2_000_000, 65_000,
               0.40, 0.60, 0.90, 0.20, 0.60, "Education"),
    Occupation("software_dev", "Software Developers", 1_600_000, 120_000,
               0.35, 0.95, 0.40, 0.10, 0.95, "Technology"),
    Occupation("janitors", "Janitors & Cleaners", 2_300_000, 31_000,
               0.60, 0.20, 0.20, 0.90, 0.20, "Facilities"),
    # Tax prep and audit checklists are formulaic
    Occupation("accountants", "Accountants & Auditors", 1_500_000, 78_000,
               0.80, 0.85, 0.40, 0.10, 0.70, "Finance"),

    # Tech / knowledge work
    # Chatbots already absorb tier-1 tickets
    Occupation("it_support", "IT Support Specialists", 920_000, 62_000,
               0.75, 0.55, 0.60, 0.20, 0.35, "Technology", is_infrastructure=True),
    Occupation("data_scientists", "Data Scientists", 180_000, 108_000,
               0.45, 0.95, 0.30, 0.05, 0.85, "Technology"),
    Occupation("cybersecurity", "Cybersecurity Analysts", 170_000, 120_000,
               0.30, 0.90, 0.30, 0.05, 0.90, "Technology", is_infrastructure=True),
    # LLMs write documentation directly
    Occupation("technical_writers", "Technical Writers", 55_000, 80_000,
               0.80, 0.60, 0.30, 0.05, 0.30, "Technology"),
    Occupation("data_entry", "Data Entry Keyers", 140_000, 38_000,
               0.95, 0.15, 0.20, 0.10, 0.05, "Administrative"),
    Occupation("network_admins", "Network & Systems Admins", 350_000, 92_000,
               0.55, 0.75, 0.30, 0.30, 0.60, "Technology", is_infrastructure=True),
    Occupation("mgmt_analysts", "Management Analysts", 950_000, 99_000,
               0.50, 0.85, 0.60, 0.05, 0.75, "Management"),
    Occupation("systems_analysts", "Computer Systems Analysts", 600_000, 103_000,
               0.60, 0.85, 0.40, 0.05, 0.70, "Technology", is_infrastructure=True),
    Occupation("ml_engineers", "ML & AI Engineers", 80_000, 145_000,
               0.20, 0.98, 0.30, 0.05, 0.95, "Technology"),
    # Generative image models hit production design work directly
    Occupation("graphic_designers", "Graphic Designers", 200_000, 58_000,
               0.70, 0.60, 0.30, 0.30, 0.25, "Creative"),
]

# 44,845,000 / 0.92: ~8% structural unemployment among the tracked labor force
BASE_LABOR_FORCE = 48_744_565


class OccupationDataset:
    """Validated, index-addressable roster of occupations plus the labor force."""

    def __init__(self, occupations: Iterable[Occupation], labor_force: float = BASE_LABOR_FORCE):
        self.occupations: Tuple[Occupation, ...] = tuple(occupations)
        self.labor_force = float(labor_force)
        self._validate()

        self.ids: Tuple[str, ...] = tuple(o.id for o in self.occupations)
        self._index: Dict[str, int] = {oid: i for i, oid in enumerate(self.ids)}
        self._masks: Dict[Callable, np.ndarray] = {}

        self.base_employment = self._column("employment")
        self.base_wage = self._column("mean_wage")
        self.routine = self._column("routine_score")
        self.social = self._column("social_score")
        self.complementarity = self._column("complementarity_score")

        self.total_employment = float(self.base_employment.sum())
        self.base_gdp = float(np.sum(self.base_employment * self.base_wage))
        self.avg_base_wage = float(self.base_wage.mean()) if len(self) else 0.0

    def _column(self, attr: str) -> np.ndarray:
        arr = np.array([getattr(o, attr) for o in self.occupations], dtype=float)
        arr.flags.writeable = False
        return arr

    def _validate(self) -> None:
        if self.labor_force <= 0:
            raise ConfigError(f"labor_force must be positive, got {self.labor_force}")
        seen = set()
        for occ in self.occupations:
            if not occ.id:
                raise ConfigError(f"Occupation {occ.name!r} has an empty id")
            if occ.id in seen:
                raise ConfigError(f"Duplicate occupation id {occ.id!r}")
            seen.add(occ.id)
            if occ.employment < 0 or occ.mean_wage < 0:
                raise ConfigError(
                    f"Occupation {occ.id!r}: employment and mean_wage must be non-negative"
                )
            for attr in SCORE_FIELDS:
                val = getattr(occ, attr)
                if not 0.0 <= val <= 1.0:
                    raise ConfigError(
                        f"Occupation {occ.id!r}: {attr} must be in [0, 1], got {val}"
                    )

    def __len__(self) -> int:
        return len(self.occupations)

    def __iter__(self):
        return iter(self.occupations)

    def __getitem__(self, occupation_id: str) -> Occupation:
        return self.occupations[self.index_of(occupation_id)]

    def index_of(self, occupation_id: str) -> int:
        try:
            return self._index[occupation_id]
        except KeyError:
            raise UnknownOccupationError(occupation_id) from None

    def mask(self, selector: Callable[[Occupation], bool]) -> np.ndarray:
        """Boolean array marking the occupations the predicate selects."""
        cached = self._masks.get(selector)
        if cached is None:
            cached = np.array([bool(selector(o)) for o in self.occupations], dtype=bool)
            cached.flags.writeable = False
            self._masks[selector] = cached
        return cached

    def baseline_employment_of(self, selector: Callable[[Occupation], bool]) -> float:
        return float(self.base_employment[self.mask(selector)].sum())


def dataset_from_records(records: Iterable[Mapping], labor_force: float) -> OccupationDataset:
    """Build a dataset from plain mappings (e.g. parsed YAML or JSON)."""
    occupations = []
    for rec in records:
        try:
            occupations.append(Occupation(**rec))
        except TypeError as exc:
            raise ConfigError(f"Invalid occupation record {rec.get('id', '?')!r}: {exc}") from exc
    return OccupationDataset(occupations, labor_force)


def load_dataset(path) -> OccupationDataset:
    """Load an occupation roster from a YAML file with `labor_force` and `occupations` keys."""
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict) or "occupations" not in raw:
        raise ConfigError(f"Dataset file {path} must define an 'occupations' list")
    return dataset_from_records(raw["occupations"], raw.get("labor_force", BASE_LABOR_FORCE))


DEFAULT_DATASET = OccupationDataset(DEFAULT_OCCUPATIONS, BASE_LABOR_FORCE)
