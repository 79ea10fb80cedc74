from __future__ import annotations
from typing import Optional

from groq import Groq

from metahunter.config.env import GroqConfig, get_groq_config


class GroqGenerator:
    """Single-shot chat completion: one user message in, message text out.

    The SDK client is created on first use so a missing API key surfaces as a
    failed completion instead of a failed import.
    """

    def __init__(self, config: GroqConfig | None = None, client: Optional[Groq] = None):
        self.config = config or get_groq_config()
        self._client = client

    @property
    def client(self) -> Groq:
        if self._client is None:
            self._client = Groq(api_key=self.config.api_key)
        return self._client

    def complete(self, prompt: str) -> str:
        completion = self.client.chat.completions.create(
            messages=[{"role": "user", "content": prompt}],
            model=self.config.model,
        )
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""
