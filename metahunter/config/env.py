from __future__ import annotations
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw not in (None, "") else default


@dataclass(frozen=True)
class DexScreenerConfig:
    base_url: str = "https://api.dexscreener.com"
    chain_id: str = "solana"
    batch_size: int = 30  # upstream limit on addresses per token lookup
    timeout_sec: float = 10.0


def get_dexscreener_config() -> DexScreenerConfig:
    cfg = DexScreenerConfig(
        base_url=(os.getenv("DEXSCREENER_BASE_URL") or DexScreenerConfig.base_url).rstrip("/"),
        chain_id=os.getenv("HUNT_CHAIN_ID") or DexScreenerConfig.chain_id,
        batch_size=_env_int("HUNT_BATCH_SIZE", DexScreenerConfig.batch_size),
        timeout_sec=_env_float("HUNT_HTTP_TIMEOUT", DexScreenerConfig.timeout_sec),
    )
    validate_dexscreener_config(cfg)
    return cfg


def validate_dexscreener_config(cfg: DexScreenerConfig) -> None:
    if not (1 <= cfg.batch_size <= 30):
        raise ValueError("batch size must be between 1 and 30 (DexScreener token lookup limit)")
    if cfg.timeout_sec <= 0:
        raise ValueError("HTTP timeout must be positive")


@dataclass(frozen=True)
class GroqConfig:
    api_key: str | None = None
    model: str = "llama-3.3-70b-versatile"


def get_groq_config() -> GroqConfig:
    return GroqConfig(
        api_key=os.getenv("GROQ_API_KEY"),
        model=os.getenv("GROQ_MODEL") or GroqConfig.model,
    )


@dataclass(frozen=True)
class HuntConfig:
    evidence_limit: int = 100
    fallback_size: int = 20
    min_support: int = 3


def get_hunt_config() -> HuntConfig:
    cfg = HuntConfig(
        evidence_limit=_env_int("HUNT_EVIDENCE_LIMIT", HuntConfig.evidence_limit),
        fallback_size=_env_int("HUNT_FALLBACK_SIZE", HuntConfig.fallback_size),
        min_support=_env_int("HUNT_MIN_SUPPORT", HuntConfig.min_support),
    )
    validate_hunt_config(cfg)
    return cfg


def validate_hunt_config(cfg: HuntConfig) -> None:
    if cfg.evidence_limit < 1:
        raise ValueError("evidence limit must be at least 1")
    if cfg.fallback_size < 0:
        raise ValueError("fallback size must not be negative")
    if cfg.min_support < 1:
        raise ValueError("minimum support must be at least 1")


@dataclass(frozen=True)
class ServerConfig:
    port: int = 3000
    api_key: str | None = None
    rate_limit_n: int = 5
    rate_limit_window_sec: float = 1.0
    trust_proxy: bool = False  # honour X-Forwarded-For only behind a proxy


def get_server_config() -> ServerConfig:
    return ServerConfig(
        port=_env_int("PORT", ServerConfig.port),
        api_key=os.getenv("API_KEY"),
        rate_limit_n=_env_int("RATE_LIMIT_N", ServerConfig.rate_limit_n),
        rate_limit_window_sec=_env_float("RATE_LIMIT_WINDOW_SEC", ServerConfig.rate_limit_window_sec),
        trust_proxy=(os.getenv("TRUST_PROXY") or "").strip().lower() in ("1", "true", "yes"),
    )
