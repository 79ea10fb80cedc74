from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar

from metahunter.ingestion.dexscreener_client import EnrichedRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


@dataclass(frozen=True)
class BatchResult:
    addresses: Tuple[str, ...]
    records: Tuple[EnrichedRecord, ...] = field(default_factory=tuple)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def unique_in_order(values: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(values))


async def _run_batch(
    lookup: Callable[[Sequence[str]], Awaitable[List[EnrichedRecord]]],
    addresses: List[str],
) -> BatchResult:
    try:
        records = await lookup(addresses)
    except Exception as e:
        logger.warning("token lookup failed for batch of %d: %r", len(addresses), e)
        return BatchResult(addresses=tuple(addresses), error=repr(e))
    return BatchResult(addresses=tuple(addresses), records=tuple(records))


async def enrich(client, addresses: Sequence[str], batch_size: int = 30) -> Tuple[List[EnrichedRecord], List[BatchResult]]:
    """Look up every address in batches of at most ``batch_size``, concurrently.

    A failed batch contributes no records; it is kept in the returned
    BatchResult list with its failure reason. Records are concatenated in
    batch order.
    """
    unique = unique_in_order(addresses)
    batches = chunk(unique, batch_size)
    results = await asyncio.gather(*(_run_batch(client.lookup_tokens, b) for b in batches))
    records = [r for res in results for r in res.records]
    failed = sum(1 for res in results if not res.ok)
    logger.info("enriched %d addresses in %d batches (%d failed), %d pairs",
                len(unique), len(batches), failed, len(records))
    return records, list(results)
