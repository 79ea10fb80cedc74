import unittest
from types import SimpleNamespace

from metahunter.config.env import GroqConfig
from metahunter.narrative.groq_client import GroqGenerator
from metahunter.narrative.requester import (
    GENERATION_FAILED, INSUFFICIENT_EVIDENCE, NO_ANALYSIS, build_prompt, narrate,
)
from metahunter.resolver.core import CanonicalRecord
from fakes import FakeGenerator


def rec(i: int, description: str | None = "a dog with a crown") -> CanonicalRecord:
    return CanonicalRecord(name=f"Doge {i}", symbol=f"D{i}", address=f"A{i}", url="u", description=description)


EVIDENCE = [rec(i) for i in range(10)]


class TestNarrate(unittest.TestCase):
    def test_low_support_skips_generator(self):
        for count in (0, 1, 2):
            gen = FakeGenerator()
            self.assertEqual(narrate("DOGE", count, EVIDENCE, gen), INSUFFICIENT_EVIDENCE)
            self.assertEqual(gen.prompts, [])

    def test_min_support_override(self):
        gen = FakeGenerator()
        self.assertEqual(narrate("DOGE", 5, EVIDENCE, gen, min_support=6), INSUFFICIENT_EVIDENCE)
        self.assertEqual(gen.prompts, [])
        self.assertEqual(narrate("DOGE", 1, EVIDENCE, gen, min_support=1), gen.text)

    def test_returns_generated_text(self):
        gen = FakeGenerator(text="Early. Doge 0 leads.")
        self.assertEqual(narrate("DOGE", 3, EVIDENCE, gen), "Early. Doge 0 leads.")
        self.assertEqual(len(gen.prompts), 1)

    def test_failure_placeholder(self):
        gen = FakeGenerator(error=RuntimeError("401 invalid api key"))
        self.assertEqual(narrate("DOGE", 5, EVIDENCE, gen), GENERATION_FAILED)

    def test_empty_text_placeholder(self):
        self.assertEqual(narrate("DOGE", 5, EVIDENCE, FakeGenerator(text="")), NO_ANALYSIS)
        self.assertEqual(narrate("DOGE", 5, EVIDENCE, FakeGenerator(text=None)), NO_ANALYSIS)


class TestPrompt(unittest.TestCase):
    def test_prompt_shape(self):
        long_bio = "x" * 200
        evidence = [rec(0, description=long_bio), rec(1, description=None)] + [rec(i) for i in range(2, 10)]
        prompt = build_prompt("DOGE", 10, evidence, scanned=187)
        self.assertIn("Analyzed 187 active Solana tokens", prompt)
        self.assertIn('DOMINANT META: "DOGE" (Found 10 projects', prompt)
        self.assertIn("- Doge 0 ($D0): " + "x" * 80 + "\n", prompt)
        self.assertNotIn("x" * 81, prompt)
        self.assertIn("- Doge 1 ($D1): No Bio", prompt)
        self.assertIn("Doge 7 ($D7)", prompt)
        self.assertNotIn("Doge 8 ($D8)", prompt)
        self.assertIn('Why is the "DOGE" meta trending', prompt)


class _FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        msg = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=msg)])


class TestGroqGenerator(unittest.TestCase):
    def test_complete(self):
        completions = _FakeCompletions("verdict: saturated")
        client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
        gen = GroqGenerator(GroqConfig(api_key="k", model="llama-test"), client=client)
        self.assertEqual(gen.complete("hello"), "verdict: saturated")
        self.assertEqual(completions.calls[0]["model"], "llama-test")
        self.assertEqual(completions.calls[0]["messages"], [{"role": "user", "content": "hello"}])

    def test_none_content(self):
        client = SimpleNamespace(chat=SimpleNamespace(completions=_FakeCompletions(None)))
        gen = GroqGenerator(GroqConfig(api_key="k"), client=client)
        self.assertEqual(gen.complete("hello"), "")
        self.assertEqual(narrate("DOGE", 3, EVIDENCE, gen), NO_ANALYSIS)


if __name__ == "__main__":
    unittest.main()
