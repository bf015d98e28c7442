"""
Batch refresh entry point: refresh every owner's portfolio from cron.

For each owner (or just ``--owner``), runs RefreshHoldingsUseCase.refresh_all
and logs which holdings changed price or yield, which were retained, and a
final summary. Holdings that fail are kept as they were and retried on the
next run.

Run:
    divtrack-refresh            # every owner
    divtrack-refresh --owner <sub>
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from dotenv import load_dotenv

from divtrack.domain.entities.holding import Holding
from divtrack.domain.entities.refresh_outcome import PortfolioRefresh, Refreshed
from divtrack.domain.errors import DivTrackError
from divtrack.infrastructure.config.settings import Settings
from divtrack.infrastructure.entrypoints.container import Container, build_container
from divtrack.infrastructure.logging_config import configure_logging
from divtrack.infrastructure.secrets.secrets_manager_adapter import bootstrap_secrets

log = logging.getLogger(__name__)

# Changes smaller than a cent (or a hundredth of a percent) are not reported.
CHANGE_THRESHOLD = Decimal("0.01")


@dataclass
class RefreshSummary:
    owners: int = 0
    holdings: int = 0
    changed: int = 0
    unchanged: int = 0
    retained: int = 0


def describe_change(before: Holding, after: Holding) -> Optional[str]:
    """Return a log line for a changed holding, or None if nothing moved."""
    parts = []
    if abs(after.current_price - before.current_price) > CHANGE_THRESHOLD:
        parts.append(f"price {before.current_price:.2f}->{after.current_price:.2f}")
    if abs(after.dividend_yield_percent - before.dividend_yield_percent) > CHANGE_THRESHOLD:
        parts.append(
            f"yield {before.dividend_yield_percent:.2f}%->{after.dividend_yield_percent:.2f}%"
        )
    if not parts:
        return None
    return f"{after.ticker}: " + ", ".join(parts)


def record(summary: RefreshSummary, before: dict[str, Holding], result: PortfolioRefresh) -> None:
    summary.owners += 1
    for outcome in result.outcomes:
        summary.holdings += 1
        if not isinstance(outcome, Refreshed):
            summary.retained += 1
            log.warning("%s retained: %s", outcome.holding.ticker, outcome.error)
            continue
        prior = before.get(outcome.holding.id, outcome.holding)
        change = describe_change(prior, outcome.holding)
        if change is None:
            summary.unchanged += 1
            log.info("%s: no changes", outcome.holding.ticker)
        else:
            summary.changed += 1
            log.info("updated %s", change)


async def run(container: Container, owner: Optional[str] = None) -> RefreshSummary:
    """Refresh the selected owners one after another.

    Raises:
        StorageUnavailable: if owners or their holdings cannot be enumerated.
    """
    repository = container.repository
    owners = [owner] if owner else await asyncio.to_thread(repository.list_owner_ids)
    log.info("refreshing portfolios for %d owner(s)", len(owners))
    summary = RefreshSummary()
    for owner_id in owners:
        before = {h.id: h for h in await asyncio.to_thread(repository.list_for_owner, owner_id)}
        result = await container.refresh.refresh_all(owner_id)
        record(summary, before, result)
    log.info(
        "refresh completed: %d holdings, %d updated, %d unchanged, %d retained",
        summary.holdings,
        summary.changed,
        summary.unchanged,
        summary.retained,
    )
    return summary


async def _main_async(owner: Optional[str]) -> int:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    container = build_container(settings)
    try:
        await run(container, owner)
    except DivTrackError as exc:
        log.error("refresh aborted: %s", exc)
        return 1
    finally:
        await container.aclose()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Refresh stored dividend holdings.")
    parser.add_argument("--owner", help="Only refresh this owner's holdings.")
    args = parser.parse_args(argv)
    load_dotenv()
    bootstrap_secrets()
    return asyncio.run(_main_async(args.owner))


if __name__ == "__main__":
    sys.exit(main())
