"""
Port (interface) for holding persistence.
Every method is scoped by owner id; no method reads or writes across owners.
Infrastructure adapters (e.g. SqlAlchemyHoldingRepository) must implement
this interface and raise only divtrack.domain.errors types.
"""

from abc import ABC, abstractmethod
from typing import Optional

from divtrack.domain.entities.holding import Holding, MarketFigures, NewHolding


class IHoldingRepository(ABC):
    @abstractmethod
    def list_for_owner(self, owner_id: str) -> list[Holding]:
        """Return the owner's holdings ordered by ticker.

        Raises:
            StorageUnavailable: if the backing store cannot be reached.
        """
        ...

    @abstractmethod
    def get(self, owner_id: str, holding_id: str) -> Optional[Holding]: ...

    @abstractmethod
    def get_by_ticker(self, owner_id: str, ticker: str) -> Optional[Holding]: ...

    @abstractmethod
    def add(self, holding: NewHolding) -> Holding:
        """Persist a new holding, deriving total value and monthly dividend
        from its figures and share count.

        Raises:
            DuplicateHolding: if (owner_id, ticker) already exists.
        """
        ...

    @abstractmethod
    def update_snapshot(
        self,
        owner_id: str,
        holding_id: str,
        figures: MarketFigures,
        *,
        share_count: Optional[int] = None,
    ) -> Holding:
        """Store new market figures for a holding and bump updated_at.

        With *share_count* the share count is replaced as well; without it the
        stored count is kept. Either way total value and monthly dividend are
        recomputed from the count that ends up stored, in the same write.

        Raises:
            NotFound: if the holding does not exist for the owner.
        """
        ...

    @abstractmethod
    def delete(self, owner_id: str, holding_id: str) -> None:
        """Raises NotFound if the holding does not exist for the owner."""
        ...

    @abstractmethod
    def list_owner_ids(self) -> list[str]:
        """Return every owner id that has at least one holding (batch jobs only)."""
        ...
