from dataclasses import dataclass
from types import MappingProxyType
from collections.abc import Mapping
from typing import Dict, Iterator

from ...errors import InvalidPlanError


@dataclass(frozen=True)
class Plan:
    key: str
    name: str
    amount: int  # minor currency units
    downloads: int

    @property
    def description(self) -> str:
        return f"{self.downloads} resume downloads"


class PlanCatalog(Mapping):
    """
    Read-only set of purchasable plans, keyed by plan key.
    """

    def __init__(self, plans: Dict[str, Plan]):
        self._plans = MappingProxyType(dict(plans))

    def __getitem__(self, key: str) -> Plan:
        return self._plans[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._plans)

    def __len__(self) -> int:
        return len(self._plans)

    def resolve(self, key: str) -> Plan:
        plan = self._plans.get(key)
        if plan is None:
            raise InvalidPlanError(f"Invalid plan: {key!r}")
        return plan


DEFAULT_PLANS = PlanCatalog(
    {
        "single": Plan(key="single", name="Single Resume", amount=999, downloads=1),
        "pro": Plan(key="pro", name="Pro Package", amount=2999, downloads=5),
        "annual": Plan(key="annual", name="Annual Access", amount=7999, downloads=999),
    }
)

# Only this plan carries an expiry
EXPIRING_PLAN = "annual"
