"""
Use-case: Holding Refresh Orchestrator.

refresh_one() recomputes one holding and propagates any failure.
refresh_all() recomputes every holding of an owner concurrently, one task per
holding. A failing holding is quarantined: it keeps its prior snapshot and is
reported as Retained(holding, error) while its siblings are still refreshed.
Only failing to enumerate the owner's holdings fails the whole call.

Per holding: Stale -> Refreshing -> Refreshed | Retained. No retries; a
retained holding is picked up again by the next refresh_all().

A refresh writes market figures only. The store recomputes value and monthly
dividend from the share count it holds at write time, so a share edit made
while a refresh is in flight is kept. Repository calls run on a worker thread.
"""

import asyncio
import logging

from divtrack.application.services.snapshot_fetcher import SnapshotFetcher
from divtrack.domain.entities.holding import Holding
from divtrack.domain.entities.refresh_outcome import (
    PortfolioRefresh,
    Refreshed,
    RefreshOutcome,
    Retained,
)
from divtrack.domain.errors import NotFound
from divtrack.domain.ports.holding_repository_port import IHoldingRepository

log = logging.getLogger(__name__)


class RefreshHoldingsUseCase:
    def __init__(self, repository: IHoldingRepository, snapshots: SnapshotFetcher) -> None:
        self._repository = repository
        self._snapshots = snapshots

    async def refresh_one(self, owner_id: str, holding_id: str) -> Holding:
        """Refresh a single holding.

        Raises:
            NotFound: if the holding does not belong to the owner.
            UpstreamUnavailable, SymbolNotFound: if the quote or dividend lookup fails.
        """
        holding = await asyncio.to_thread(self._repository.get, owner_id, holding_id)
        if holding is None:
            raise NotFound("Holding not found")
        return await self._refresh(holding)

    async def refresh_all(self, owner_id: str) -> PortfolioRefresh:
        """Refresh every holding of the owner, isolating per-holding failures.

        Raises:
            StorageUnavailable: if the owner's holdings cannot be enumerated.
        """
        holdings = await asyncio.to_thread(self._repository.list_for_owner, owner_id)
        aborted = asyncio.Event()
        try:
            outcomes = await asyncio.gather(
                *(self._refresh_quarantined(holding, aborted) for holding in holdings)
            )
        except asyncio.CancelledError:
            aborted.set()
            log.info("refresh of %d holdings for owner %s cancelled", len(holdings), owner_id)
            raise

        result = PortfolioRefresh(owner_id=owner_id, outcomes=list(outcomes))
        log.info(
            "refreshed %d/%d holdings for owner %s (%d retained)",
            len(result.refreshed),
            len(holdings),
            owner_id,
            len(result.retained),
        )
        return result

    async def _refresh_quarantined(self, holding: Holding, aborted: asyncio.Event) -> RefreshOutcome:
        try:
            fresh = await self._refresh(holding, aborted)
        except Exception as exc:
            log.warning("failed to refresh holding %s (%s): %s", holding.id, holding.ticker, exc)
            return Retained(holding, exc)
        return Refreshed(fresh)

    async def _refresh(self, holding: Holding, aborted: asyncio.Event | None = None) -> Holding:
        snapshot = await self._snapshots.fetch(
            holding.ticker, holding.share_count, company_name=holding.company_name
        )
        if aborted is not None and aborted.is_set():
            raise asyncio.CancelledError()
        return await asyncio.to_thread(
            self._repository.update_snapshot, holding.owner_id, holding.id, snapshot.figures
        )
