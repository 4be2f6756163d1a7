"""collabnet configuration via environment / .env file."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from collabnet.graph.models import EvidenceMode


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Snapshot ---
    GRAPHML_PATH: str = "network_dual.graphml"
    MAX_NODES: int = 50_000
    STRICT_INGESTION: bool = False

    # --- Explorer defaults ---
    DEFAULT_EVIDENCE_MODE: str = "both"
    DEFAULT_MIN_WEIGHT: float = 1.0
    HOP_PENALTY: float = 0.25
    SEARCH_LIMIT: int = 12

    # --- MusicBrainz verification ---
    MUSICBRAINZ_BASE_URL: str = "https://musicbrainz.org/ws/2"
    MUSICBRAINZ_USER_AGENT: str = "collabnet/0.1 (contact: you@example.com)"
    MUSICBRAINZ_MIN_INTERVAL: float = 1.2
    MUSICBRAINZ_TIMEOUT: float = 30.0

    # --- Verification cache ---
    VERIFY_CACHE_DIR: str = "/tmp/collabnet-cache"
    VERIFY_CACHE_MAX_AGE: float = 7 * 24 * 3600.0

    # --- CORS ---
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    @field_validator("DEFAULT_EVIDENCE_MODE", mode="before")
    @classmethod
    def _normalize_mode(cls, v: str) -> str:
        return EvidenceMode.parse(v).value

    @field_validator("DEFAULT_MIN_WEIGHT", "HOP_PENALTY", "MUSICBRAINZ_MIN_INTERVAL")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("SEARCH_LIMIT", "MAX_NODES")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @property
    def evidence_mode(self) -> EvidenceMode:
        return EvidenceMode(self.DEFAULT_EVIDENCE_MODE)


settings = Settings()
