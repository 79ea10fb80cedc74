from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import asyncio
import logging
import time
import uuid

import aiohttp

from metahunter.config.env import (
    DexScreenerConfig, HuntConfig, get_dexscreener_config, get_hunt_config,
)
from metahunter.ingestion.batching import BatchResult, enrich
from metahunter.ingestion.dexscreener_client import DexScreenerClient
from metahunter.narrative.groq_client import GroqGenerator
from metahunter.narrative.requester import TextGenerator, narrate
from metahunter.patterns.engine import ThemeResult, detect
from metahunter.resolver.core import CanonicalRecord, resolve

logger = logging.getLogger(__name__)

SCAN_FAILED = "Massive Scan Failed."


@dataclass
class Scan:
    id: str = field(default_factory=lambda: f"s_{uuid.uuid4().hex[:8]}")
    status: str = "running"  # running|completed|failed
    events: List[Dict[str, Any]] = field(default_factory=list)
    batches: List[BatchResult] = field(default_factory=list)
    error: Optional[str] = None


def _event(scan: Scan, stage: str, message: str):
    scan.events.append({"stage": stage, "message": message, "ts": time.time()})
    logger.info("[%s] %s: %s", scan.id, stage, message)


async def collect_tokens(scan: Scan, client, batch_size: int) -> List[CanonicalRecord]:
    """Harvest, enrich and resolve; returns the canonical token set."""
    _event(scan, "Harvest", "Fetching profiles and boosts")
    raw = await client.harvest()

    _event(scan, "Enrich", f"Looking up {len(raw)} harvested entries")
    pairs, batches = await enrich(client, [r.token_address for r in raw], batch_size)
    scan.batches = batches

    _event(scan, "Resolve", f"Merging {len(pairs)} pairs")
    return resolve(raw, pairs)


async def _scan_dexscreener(scan: Scan, cfg: DexScreenerConfig, client=None) -> List[CanonicalRecord]:
    if client is not None:
        return await collect_tokens(scan, client, cfg.batch_size)
    async with aiohttp.ClientSession() as session:
        return await collect_tokens(scan, DexScreenerClient(session, cfg), cfg.batch_size)


def failure_envelope() -> Dict[str, Any]:
    return {"success": False, "error": SCAN_FAILED}


def success_envelope(total: int, theme: ThemeResult, analysis: str) -> Dict[str, Any]:
    return {
        "success": True,
        "total_scanned": total,
        "meta_keyword": theme.theme,
        "meta_count": theme.support_count,
        "ai_analysis": analysis,
        "filtered_list": [r.to_dict() for r in theme.evidence],
    }


def hunt(
    generator: Optional[TextGenerator] = None,
    client=None,
    dex_config: Optional[DexScreenerConfig] = None,
    hunt_config: Optional[HuntConfig] = None,
    scan: Optional[Scan] = None,
) -> Tuple[Dict[str, Any], int]:
    """Run one full scan and return ``(envelope, http_status)``.

    ``client`` replaces the DexScreener client (tests pass a fake exposing
    ``harvest`` and ``lookup_tokens``); ``generator`` replaces the Groq client.
    """
    scan = scan or Scan()
    try:
        dex_cfg = dex_config or get_dexscreener_config()
        hunt_cfg = hunt_config or get_hunt_config()
        tokens = asyncio.run(_scan_dexscreener(scan, dex_cfg, client))

        _event(scan, "Detect", f"Ranking words across {len(tokens)} tokens")
        theme = detect(tokens, evidence_limit=hunt_cfg.evidence_limit, fallback_size=hunt_cfg.fallback_size)
    except Exception as e:
        scan.status = "failed"
        scan.error = str(e)
        logger.exception("scan %s failed", scan.id)
        _event(scan, "Error", str(e))
        return failure_envelope(), 500

    _event(scan, "Narrate", f"Meta '{theme.theme}' x{theme.support_count}")
    analysis = narrate(
        theme.theme, theme.support_count, theme.evidence,
        generator or GroqGenerator(), scanned=len(tokens), min_support=hunt_cfg.min_support,
    )
    scan.status = "completed"
    _event(scan, "Done", "Scan completed")
    return success_envelope(len(tokens), theme, analysis), 200
