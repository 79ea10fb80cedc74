from __future__ import annotations
import logging
from typing import List, Optional, Protocol, Sequence

from metahunter.resolver.core import CanonicalRecord

logger = logging.getLogger(__name__)

INSUFFICIENT_EVIDENCE = "⚠️ Market is scattered. No strong narrative found."
GENERATION_FAILED = "⚠️ AI Error. Check API Key."
NO_ANALYSIS = "No analysis generated."

MIN_SUPPORT = 3
PROMPT_RECORDS = 8
DESCRIPTION_CHARS = 80


class TextGenerator(Protocol):
    def complete(self, prompt: str) -> str: ...


def _record_line(r: CanonicalRecord) -> str:
    bio = r.description[:DESCRIPTION_CHARS] if r.description else "No Bio"
    return f"- {r.name} (${r.symbol}): {bio}"


def build_prompt(theme: str, support_count: int, evidence: Sequence[CanonicalRecord], scanned: Optional[int] = None) -> str:
    lines: List[str] = [_record_line(r) for r in evidence[:PROMPT_RECORDS]]
    scope = f"{scanned}" if scanned is not None else "200+"
    return "\n".join([
        f"SCAN RESULT: Analyzed {scope} active Solana tokens.",
        f'DOMINANT META: "{theme}" (Found {support_count} projects matching this theme).',
        "",
        "Top Projects in this Meta:",
        *lines,
        "",
        "TASK:",
        f'1. Why is the "{theme}" meta trending right now?',
        '2. Which of these looks like the "Market Leader" vs "Clone"?',
        "3. Final Verdict: Is this trend early or saturated?",
        "",
        "Be brutally honest.",
    ])


def narrate(
    theme: str,
    support_count: int,
    evidence: Sequence[CanonicalRecord],
    generator: TextGenerator,
    scanned: Optional[int] = None,
    min_support: int = MIN_SUPPORT,
) -> str:
    """Return generated analysis text or one of the fixed placeholders. Never raises."""
    if support_count < min_support:
        return INSUFFICIENT_EVIDENCE
    prompt = build_prompt(theme, support_count, evidence, scanned=scanned)
    try:
        text = generator.complete(prompt)
    except Exception as e:
        logger.error("narrative generation failed: %s", e)
        return GENERATION_FAILED
    if not isinstance(text, str) or not text.strip():
        return NO_ANALYSIS
    return text
