from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional
import math

from metahunter.ingestion.dexscreener_client import EnrichedRecord, RawCandidate

NO_DESCRIPTION = "No description."


@dataclass(frozen=True)
class CanonicalRecord:
    name: str
    symbol: str
    address: str
    url: str
    icon: Optional[str] = None
    header: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _liquidity(rec: EnrichedRecord) -> float:
    # Unknown liquidity never beats a known value
    return rec.liquidity_usd if rec.liquidity_usd is not None else -math.inf


def _beats(challenger: EnrichedRecord, current: EnrichedRecord) -> bool:
    lc, lk = _liquidity(challenger), _liquidity(current)
    if lc != lk:
        return lc > lk
    # Equal liquidity: smallest (url, name, symbol) wins so input order never matters
    return (challenger.pair_url, challenger.base_name, challenger.base_symbol) < (
        current.pair_url, current.base_name, current.base_symbol)


def best_pairs(enriched: Iterable[EnrichedRecord]) -> Dict[str, EnrichedRecord]:
    best: Dict[str, EnrichedRecord] = {}
    for rec in enriched:
        cur = best.get(rec.base_address)
        if cur is None or _beats(rec, cur):
            best[rec.base_address] = rec
    return best


def resolve(raw: Iterable[RawCandidate], enriched: Iterable[EnrichedRecord]) -> List[CanonicalRecord]:
    """Build one CanonicalRecord per enriched address.

    - name/symbol/url come from the pair with the highest liquidity
    - icon/header/description come from the first harvested profile for that
      address, else from the pair's info fields (description falls back to a placeholder)
    - profiles that were never enriched are dropped
    Ordering: harvest order of addresses, then pair-only addresses sorted.
    """
    profiles: Dict[str, RawCandidate] = {}
    for r in raw:
        profiles.setdefault(r.token_address, r)
    winners = best_pairs(enriched)

    ordered: List[str] = [a for a in profiles if a in winners]
    ordered += sorted(a for a in winners if a not in profiles)

    out: List[CanonicalRecord] = []
    for addr in ordered:
        pair = winners[addr]
        prof = profiles.get(addr)
        if prof is not None:
            icon, header, description = prof.icon, prof.header, prof.description
        else:
            icon, header, description = pair.image_url, pair.header_url, NO_DESCRIPTION
        out.append(CanonicalRecord(
            name=pair.base_name,
            symbol=pair.base_symbol,
            address=addr,
            url=pair.pair_url,
            icon=icon,
            header=header,
            description=description,
        ))
    return out
