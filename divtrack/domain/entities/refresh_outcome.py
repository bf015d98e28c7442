"""
Domain entities for bulk refresh results.
Each holding in a bulk refresh ends up either Refreshed (fresh snapshot
persisted) or Retained (prior snapshot kept, with the error that caused it).
"""

from dataclasses import dataclass, field
from typing import Union

from divtrack.domain.entities.holding import Holding


@dataclass(frozen=True)
class Refreshed:
    holding: Holding

    status = "refreshed"


@dataclass(frozen=True)
class Retained:
    holding: Holding
    error: Exception

    status = "retained"


RefreshOutcome = Union[Refreshed, Retained]


@dataclass(frozen=True)
class PortfolioRefresh:
    owner_id: str
    outcomes: list[RefreshOutcome] = field(default_factory=list)

    @property
    def holdings(self) -> list[Holding]:
        return [outcome.holding for outcome in self.outcomes]

    @property
    def refreshed(self) -> list[Refreshed]:
        return [o for o in self.outcomes if isinstance(o, Refreshed)]

    @property
    def retained(self) -> list[Retained]:
        return [o for o in self.outcomes if isinstance(o, Retained)]
