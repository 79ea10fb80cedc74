from __future__ import annotations
import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import aiohttp

from metahunter.config.env import DexScreenerConfig, get_dexscreener_config

"""
DexScreener public API (no key required).
Three harvest feeds list promoted / freshly profiled tokens; the token lookup
expands up to 30 comma-separated addresses into trading pairs.
Parsers are pure and tested offline with small JSON fixtures.
"""

logger = logging.getLogger(__name__)

HARVEST_PATHS = (
    "/token-profiles/latest/v1",
    "/token-boosts/latest/v1",
    "/token-boosts/top/v1",
)


class HarvestError(Exception):
    """Raised when a harvest feed returns something other than a JSON list."""


@dataclass(frozen=True)
class RawCandidate:
    chain_id: str
    token_address: str
    icon: Optional[str] = None
    header: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class EnrichedRecord:
    base_name: str
    base_symbol: str
    base_address: str
    pair_url: str
    liquidity_usd: Optional[float] = None
    image_url: Optional[str] = None
    header_url: Optional[str] = None


def build_token_lookup_url(addresses: Sequence[str], base_url: str | None = None) -> str:
    base = base_url or get_dexscreener_config().base_url
    return f"{base}/latest/dex/tokens/{','.join(addresses)}"


def _opt_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _opt_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(f) else f


def parse_profiles(items: Any, chain_id: str = "solana") -> List[RawCandidate]:
    """Keep entries of the target chain that carry a token address.
    Order is preserved and duplicate addresses are kept.
    """
    if not isinstance(items, list):
        return []
    out: List[RawCandidate] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        if item.get("chainId") != chain_id:
            continue
        addr = _opt_str(item.get("tokenAddress"))
        if addr is None:
            continue
        out.append(
            RawCandidate(
                chain_id=chain_id,
                token_address=addr,
                icon=_opt_str(item.get("icon")),
                header=_opt_str(item.get("header")),
                description=_opt_str(item.get("description")),
            )
        )
    return out


def parse_pairs(payload: Any) -> List[EnrichedRecord]:
    """Parse a token lookup response (``{"pairs": [...]}``) into EnrichedRecords.
    Pairs without a base token address are skipped.
    """
    pairs = payload.get("pairs") if isinstance(payload, dict) else None
    if not isinstance(pairs, list):
        return []
    out: List[EnrichedRecord] = []
    for p in pairs:
        if not isinstance(p, dict):
            continue
        base = p.get("baseToken")
        if not isinstance(base, dict):
            continue
        addr = _opt_str(base.get("address"))
        if addr is None:
            continue
        liquidity = p.get("liquidity")
        info = p.get("info") if isinstance(p.get("info"), dict) else {}
        out.append(
            EnrichedRecord(
                base_name=str(base.get("name") or ""),
                base_symbol=str(base.get("symbol") or ""),
                base_address=addr,
                pair_url=str(p.get("url") or ""),
                liquidity_usd=_opt_float(liquidity.get("usd")) if isinstance(liquidity, dict) else None,
                image_url=_opt_str(info.get("imageUrl")),
                header_url=_opt_str(info.get("header")),
            )
        )
    return out


class DexScreenerClient:
    """Thin async wrapper over the DexScreener endpoints used by a scan.

    The caller owns the ``aiohttp.ClientSession``; every request carries the
    configured total timeout and no retries are attempted.
    """

    def __init__(self, session: aiohttp.ClientSession, config: DexScreenerConfig | None = None):
        self.session = session
        self.config = config or get_dexscreener_config()
        self._timeout = aiohttp.ClientTimeout(total=self.config.timeout_sec)

    async def _get_json(self, url: str) -> Any:
        async with self.session.get(
            url,
            headers={"Accept": "application/json"},
            timeout=self._timeout,
        ) as resp:
            resp.raise_for_status()
            return await resp.json(content_type=None)

    async def _harvest_feed(self, path: str) -> List[Dict[str, Any]]:
        payload = await self._get_json(f"{self.config.base_url}{path}")
        if not isinstance(payload, list):
            raise HarvestError(f"unexpected payload from {path}: {type(payload).__name__}")
        return payload

    async def harvest(self) -> List[RawCandidate]:
        # Wait for all three feeds to settle, then fail on the first error
        feeds = await asyncio.gather(
            *(self._harvest_feed(p) for p in HARVEST_PATHS), return_exceptions=True
        )
        errors = [(p, f) for p, f in zip(HARVEST_PATHS, feeds) if isinstance(f, BaseException)]
        for path, exc in errors:
            logger.warning("harvest feed %s failed: %r", path, exc)
        if errors:
            raise errors[0][1]
        items = [item for feed in feeds for item in feed]
        raw = parse_profiles(items, chain_id=self.config.chain_id)
        logger.info("harvested %d items, %d on %s", len(items), len(raw), self.config.chain_id)
        return raw

    async def lookup_tokens(self, addresses: Sequence[str]) -> List[EnrichedRecord]:
        payload = await self._get_json(build_token_lookup_url(addresses, self.config.base_url))
        return parse_pairs(payload)
