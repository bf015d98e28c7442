"""
Use-case: create, edit, list and delete an owner's holdings.
Depends only on Domain ports and entities, plus the SnapshotFetcher service.
Every method takes the owner id produced by the AccessGuard; none accepts an
owner id from anywhere else. The async methods run repository calls on a
worker thread.
"""

import asyncio
import logging

from divtrack.application.services.snapshot_fetcher import SnapshotFetcher
from divtrack.domain.entities.holding import Holding, NewHolding
from divtrack.domain.errors import DuplicateHolding, NotFound
from divtrack.domain.ports.holding_repository_port import IHoldingRepository
from divtrack.domain.tickers import normalize_ticker, validate_share_count

log = logging.getLogger(__name__)


class CreateOrUpdateHoldingUseCase:
    def __init__(self, repository: IHoldingRepository, snapshots: SnapshotFetcher) -> None:
        self._repository = repository
        self._snapshots = snapshots

    def list_holdings(self, owner_id: str) -> list[Holding]:
        return self._repository.list_for_owner(owner_id)

    async def create(self, owner_id: str, ticker: str, share_count: int) -> Holding:
        """Add *ticker* to the owner's portfolio with a freshly computed snapshot.

        Raises:
            InvalidInput: for a malformed ticker or non-positive share count.
            DuplicateHolding: if the owner already holds the ticker (any case).
            UpstreamUnavailable, SymbolNotFound: if the quote or dividend lookup fails.
        """
        symbol = normalize_ticker(ticker)
        share_count = validate_share_count(share_count)
        if await asyncio.to_thread(self._repository.get_by_ticker, owner_id, symbol) is not None:
            raise DuplicateHolding("Stock already exists in portfolio")

        snapshot = await self._snapshots.fetch(symbol, share_count)
        new_holding = NewHolding(
            ticker=snapshot.ticker,
            company_name=snapshot.company_name,
            share_count=share_count,
            figures=snapshot.figures,
            owner_id=owner_id,
        )
        holding = await asyncio.to_thread(self._repository.add, new_holding)
        log.info("owner %s added %s x%d", owner_id, holding.ticker, share_count)
        return holding

    async def update_shares(self, owner_id: str, holding_id: str, share_count: int) -> Holding:
        """Change the share count of a holding and recompute its snapshot.

        Raises:
            InvalidInput: for a non-positive share count.
            NotFound: if the holding does not belong to the owner.
            UpstreamUnavailable, SymbolNotFound: if the quote or dividend lookup fails.
        """
        share_count = validate_share_count(share_count)
        existing = await asyncio.to_thread(self._repository.get, owner_id, holding_id)
        if existing is None:
            raise NotFound("Holding not found")

        snapshot = await self._snapshots.fetch(
            existing.ticker, share_count, company_name=existing.company_name
        )
        return await asyncio.to_thread(
            self._repository.update_snapshot,
            owner_id,
            holding_id,
            snapshot.figures,
            share_count=share_count,
        )

    def delete(self, owner_id: str, holding_id: str) -> None:
        self._repository.delete(owner_id, holding_id)
        log.info("owner %s deleted holding %s", owner_id, holding_id)
