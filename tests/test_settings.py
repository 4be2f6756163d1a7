"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from collabnet.config.settings import Settings
from collabnet.graph.models import EvidenceMode


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("DEFAULT_EVIDENCE_MODE", "DEFAULT_MIN_WEIGHT", "HOP_PENALTY", "SEARCH_LIMIT"):
            monkeypatch.delenv(name, raising=False)
        s = Settings(_env_file=None)
        assert s.DEFAULT_EVIDENCE_MODE == "both"
        assert s.evidence_mode is EvidenceMode.BOTH
        assert s.DEFAULT_MIN_WEIGHT == 1.0
        assert s.HOP_PENALTY == 0.25
        assert s.SEARCH_LIMIT == 12
        assert s.MUSICBRAINZ_MIN_INTERVAL == 1.2

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_EVIDENCE_MODE", "Instruments")
        monkeypatch.setenv("HOP_PENALTY", "0.5")
        monkeypatch.setenv("STRICT_INGESTION", "true")
        s = Settings(_env_file=None)
        assert s.DEFAULT_EVIDENCE_MODE == "instr"
        assert s.evidence_mode is EvidenceMode.INSTRUMENT
        assert s.HOP_PENALTY == 0.5
        assert s.STRICT_INGESTION is True

    def test_env_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("GRAPHML_PATH=/data/network.graphml\nSEARCH_LIMIT=20\n")
        s = Settings(_env_file=str(env))
        assert s.GRAPHML_PATH == "/data/network.graphml"
        assert s.SEARCH_LIMIT == 20

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, DEFAULT_EVIDENCE_MODE="producer")

    def test_negative_hop_penalty_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, HOP_PENALTY=-0.1)

    def test_search_limit_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, SEARCH_LIMIT=0)
