import unittest

from metahunter.patterns.engine import (
    FALLBACK_SIZE, NO_THEME, count_words, detect, normalize_name, qualifying_words, rank_words,
)
from metahunter.resolver.core import CanonicalRecord


def rec(name: str, addr: str | None = None, description: str | None = None) -> CanonicalRecord:
    return CanonicalRecord(name=name, symbol="X", address=addr or name, url="u", description=description)


class TestNormalization(unittest.TestCase):
    def test_normalize_name(self):
        self.assertEqual(normalize_name("Doge-King 2.0").split(), ["DOGE", "KING"])
        self.assertEqual(normalize_name("Pepe Wif Hat ($PWH)").split(), ["PEPE", "WIF", "HAT"])
        self.assertEqual(normalize_name("café").split(), ["CAF"])

    def test_qualifying_words(self):
        self.assertEqual(qualifying_words("Official Doge Coin"), ["DOGE"])
        self.assertEqual(qualifying_words("ab abc abcdefghijklmn abcdefghijklmno"), ["ABC", "ABCDEFGHIJKLMN"])
        self.assertEqual(qualifying_words("Solana AI Moon"), [])

    def test_repeats_count_twice(self):
        counts = count_words([rec("Cat Cat Club")])
        self.assertEqual(counts, {"CAT": 2, "CLUB": 1})

    def test_rank_ties_keep_first_seen(self):
        counts = count_words([rec("Frog Wizard"), rec("Wizard Frog")])
        self.assertEqual(rank_words(counts), [("FROG", 2), ("WIZARD", 2)])


class TestDetect(unittest.TestCase):
    def test_doge_theme(self):
        records = [rec("DOGE KING", "a"), rec("DOGE QUEEN", "b"), rec("DOGE LORD", "c")]
        result = detect(records)
        self.assertEqual(result.theme, "DOGE")
        self.assertEqual(result.support_count, 3)
        self.assertEqual([r.address for r in result.evidence], ["a", "b", "c"])
        self.assertTrue(result.found)

    def test_stop_words_only(self):
        records = [rec("SOLANA", "a"), rec("MOON", "b"), rec("Solana Moon", "c"), rec("MOON", "d")]
        result = detect(records)
        self.assertEqual(result.theme, NO_THEME)
        self.assertEqual(result.support_count, 0)
        self.assertFalse(result.found)
        self.assertEqual([r.address for r in result.evidence], ["a", "b", "c", "d"])

    def test_fallback_capped(self):
        records = [rec("Pump", f"a{i}") for i in range(30)]
        result = detect(records)
        self.assertEqual(len(result.evidence), FALLBACK_SIZE)
        self.assertEqual(result.evidence[0].address, "a0")

    def test_fallback_size_override(self):
        records = [rec("Pump", f"a{i}") for i in range(5)]
        result = detect(records, fallback_size=2)
        self.assertEqual([r.address for r in result.evidence], ["a0", "a1"])

    def test_substring_and_description_match(self):
        records = [
            rec("Frog One", "a"),
            rec("Frog Two", "b"),
            rec("Froggy", "c"),                       # partial-word hit
            rec("Lily Pad", "d", description="home of every frog"),
            rec("Cat", "e"),
        ]
        result = detect(records)
        self.assertEqual(result.theme, "FROG")
        self.assertEqual(result.support_count, 2)
        self.assertEqual([r.address for r in result.evidence], ["a", "b", "c", "d"])

    def test_ticker_suffix_ignored(self):
        records = [rec("Bonk ($WIFE)", "a"), rec("Wife Bonk", "b"), rec("Bonk Inu", "c")]
        result = detect(records)
        self.assertEqual(result.theme, "BONK")
        self.assertEqual(result.support_count, 3)

    def test_evidence_limit(self):
        records = [rec(f"Trump {i}", f"a{i}") for i in range(10)]
        result = detect(records, evidence_limit=4)
        self.assertEqual(result.support_count, 10)
        self.assertEqual(len(result.evidence), 4)

    def test_empty(self):
        result = detect([])
        self.assertEqual(result.theme, NO_THEME)
        self.assertEqual(result.evidence, ())

    def test_idempotent(self):
        records = [rec("Doge King", "a"), rec("Cat King", "b"), rec("Doge Cat", "c")]
        self.assertEqual(detect(records), detect(list(records)))


if __name__ == "__main__":
    unittest.main()
