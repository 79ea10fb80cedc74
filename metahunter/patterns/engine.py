from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import re

from metahunter.resolver.core import CanonicalRecord

NO_THEME = "None"
FALLBACK_SIZE = 20
MIN_WORD_LEN = 3
MAX_WORD_LEN = 14

# Chain names, hype words and filler that would otherwise win every scan
STOP_WORDS = frozenset({
    "THE", "AND", "FOR", "SOL", "TOKEN", "COIN", "MEME", "PRO", "MAX",
    "BULL", "PUMP", "MOON", "DEV", "CTO", "COMMUNITY", "OFFICIAL",
    "REAL", "NEW", "FINANCE", "SWAP", "PROTOCOL", "BETA", "ALPHA", "BASE",
    "SOLANA", "COINS", "GROUP", "TEAM", "LIVE", "VIDEO", "GAME", "AI", "CHAT",
})

_NON_LETTER = re.compile(r"[^A-Z ]")


@dataclass(frozen=True)
class ThemeResult:
    theme: str
    support_count: int
    evidence: Tuple[CanonicalRecord, ...] = field(default_factory=tuple)

    @property
    def found(self) -> bool:
        return self.theme != NO_THEME


def normalize_name(name: str) -> str:
    # "Doge King ($DK)" -> "DOGE KING "
    head = name.upper().split("($")[0]
    return _NON_LETTER.sub(" ", head)


def qualifying_words(name: str) -> List[str]:
    return [
        w for w in normalize_name(name).split()
        if MIN_WORD_LEN <= len(w) <= MAX_WORD_LEN and w not in STOP_WORDS
    ]


def count_words(records: Sequence[CanonicalRecord]) -> Dict[str, int]:
    """Word -> occurrences across all names, in first-seen order."""
    counts: Dict[str, int] = {}
    for r in records:
        for w in qualifying_words(r.name or ""):
            counts[w] = counts.get(w, 0) + 1
    return counts


def rank_words(counts: Dict[str, int]) -> List[Tuple[str, int]]:
    # sorted() is stable: equal counts keep first-seen order
    return sorted(counts.items(), key=lambda kv: -kv[1])


def matches_theme(record: CanonicalRecord, theme: str) -> bool:
    # Plain substring containment: "DOGE" also matches "DOGECOIN"
    if theme in (record.name or "").upper():
        return True
    return bool(record.description) and theme in record.description.upper()


def detect(
    records: Sequence[CanonicalRecord],
    evidence_limit: Optional[int] = None,
    fallback_size: int = FALLBACK_SIZE,
) -> ThemeResult:
    ranked = rank_words(count_words(records))
    if not ranked:
        return ThemeResult(theme=NO_THEME, support_count=0, evidence=tuple(records[:fallback_size]))
    theme, count = ranked[0]
    evidence = [r for r in records if matches_theme(r, theme)]
    if evidence_limit is not None:
        evidence = evidence[:evidence_limit]
    return ThemeResult(theme=theme, support_count=count, evidence=tuple(evidence))
