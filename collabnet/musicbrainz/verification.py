"""MusicBrainz edge verification.

Independently confirms a collaboration edge by finding recordings on which
both artists appear as performers (``instrument`` or ``vocal`` relations)
in the MusicBrainz WS2 API, and lists the releases a recording appears on.

Verification is for a single clicked edge, not for building the network,
so it is deliberately capped: it browses one window of artist A's
recordings and inspects each until enough matches are found. Requests go
through a :class:`MinIntervalThrottle`; verified results are kept in a
:class:`DiskCache`.

Reference:
  MusicBrainz WS2: https://musicbrainz.org/doc/MusicBrainz_API
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any

import httpx

from collabnet.musicbrainz.rate_limit import DiskCache, MinIntervalThrottle

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

MUSICBRAINZ_API = "https://musicbrainz.org/ws/2"
PERFORMER_RELATION_TYPES = frozenset({"instrument", "vocal"})

MAX_VERIFY_LIMIT = 20
MAX_RELEASES = 30
RELEASES_PER_MATCH = 8


@dataclass
class MusicBrainzConfig:
    """Configuration for the MusicBrainz client."""
    base_url: str = MUSICBRAINZ_API
    user_agent: str = "collabnet/0.1 (contact: you@example.com)"
    timeout: float = 30.0
    min_interval: float = 1.2     # MusicBrainz asks for <= 1 req/sec
    browse_limit: int = 50        # recordings of artist A inspected per verification
    cache_dir: str = "/tmp/collabnet-cache"
    cache_max_age: float = 7 * 24 * 3600.0

    @classmethod
    def from_settings(cls, settings: Any) -> MusicBrainzConfig:
        return cls(
            base_url=settings.MUSICBRAINZ_BASE_URL,
            user_agent=settings.MUSICBRAINZ_USER_AGENT,
            timeout=settings.MUSICBRAINZ_TIMEOUT,
            min_interval=settings.MUSICBRAINZ_MIN_INTERVAL,
            cache_dir=settings.VERIFY_CACHE_DIR,
            cache_max_age=settings.VERIFY_CACHE_MAX_AGE,
        )


class MusicBrainzError(RuntimeError):
    """MusicBrainz answered with a non-success status."""

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        super().__init__(f"MusicBrainz {status_code}: {body[:200]}")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class RecordingMatch:
    """A recording on which both artists perform."""
    recording_id: str
    title: str
    releases: list[str] = field(default_factory=list)


@dataclass
class EdgeVerification:
    """Outcome of verifying one edge."""
    artist_a: str
    artist_b: str
    matches: list[RecordingMatch] = field(default_factory=list)
    cached: bool = False

    @property
    def confirmed(self) -> bool:
        return bool(self.matches)

    def to_dict(self) -> dict[str, Any]:
        return {
            "artistA": self.artist_a,
            "artistB": self.artist_b,
            "matches": [asdict(m) for m in self.matches],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], cached: bool = False) -> EdgeVerification:
        return cls(
            artist_a=data.get("artistA", ""),
            artist_b=data.get("artistB", ""),
            matches=[
                RecordingMatch(
                    recording_id=m.get("recording_id", ""),
                    title=m.get("title", ""),
                    releases=list(m.get("releases", [])),
                )
                for m in data.get("matches", [])
            ],
            cached=cached,
        )


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class MusicBrainzVerifier:
    """Async MusicBrainz client for edge verification.

    The throttle and cache are owned by the instance (or passed in to be
    shared deliberately); nothing is held at module level.
    """

    def __init__(
        self,
        config: MusicBrainzConfig | None = None,
        throttle: MinIntervalThrottle | None = None,
        cache: DiskCache | None = None,
    ) -> None:
        self._config = config or MusicBrainzConfig()
        self._throttle = throttle or MinIntervalThrottle(self._config.min_interval)
        self._cache = cache or DiskCache(
            self._config.cache_dir, max_age=self._config.cache_max_age
        )

    @property
    def cache(self) -> DiskCache:
        return self._cache

    async def verify_edge(
        self,
        artist_a: str,
        artist_b: str,
        limit: int = 6,
    ) -> EdgeVerification:
        """Find up to ``limit`` recordings where both artists perform.

        Args:
            artist_a: MusicBrainz artist id whose recordings are browsed
            artist_b: MusicBrainz artist id that must also perform
            limit: Max matches (clamped to 1..20)

        Returns:
            EdgeVerification with the matching recordings
        """
        a = (artist_a or "").strip()
        b = (artist_b or "").strip()
        if not a or not b:
            raise ValueError("artistA and artistB required")
        limit = max(1, min(MAX_VERIFY_LIMIT, int(limit)))

        key = f"verifyEdge_{a}_{b}_{limit}"
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Verification cache hit for %s", key)
            return EdgeVerification.from_dict(cached, cached=True)

        async with self._client() as client:
            browse = await self._fetch_json(
                client,
                f"{self._config.base_url}/recording",
                {"artist": a, "limit": str(self._config.browse_limit), "fmt": "json"},
            )
            recordings = (browse.get("recordings") or [])[: self._config.browse_limit]

            matches: list[RecordingMatch] = []
            for summary in recordings:
                if len(matches) >= limit:
                    break
                rid = summary.get("id", "")
                if not rid:
                    continue
                try:
                    full = await self._fetch_json(
                        client,
                        f"{self._config.base_url}/recording/{rid}",
                        {"inc": "artist-rels releases", "fmt": "json"},
                    )
                except (MusicBrainzError, httpx.HTTPError, ValueError) as e:
                    logger.debug("Skipping recording %s: %s", rid, e)
                    continue

                recording = full.get("recording") or full
                performers = performer_artist_ids(recording)
                if a in performers and b in performers:
                    matches.append(RecordingMatch(
                        recording_id=rid,
                        title=recording.get("title") or summary.get("title") or "",
                        releases=release_titles(recording)[:RELEASES_PER_MATCH],
                    ))

        result = EdgeVerification(artist_a=a, artist_b=b, matches=matches)
        self._cache.set(key, result.to_dict())
        logger.info(
            "Verified edge %s / %s: %d matching recording(s) from %d inspected",
            a, b, len(matches), len(recordings),
        )
        return result

    async def releases_for_recording(
        self,
        recording_id: str,
        max_releases: int = 12,
    ) -> list[str]:
        """Distinct release titles for a recording, in MusicBrainz order.

        Titles are de-duplicated case-insensitively; ``max_releases`` is
        clamped to 1..30.
        """
        rid = (recording_id or "").strip()
        if not rid:
            raise ValueError("rid required")
        max_releases = max(1, min(MAX_RELEASES, int(max_releases)))

        async with self._client() as client:
            full = await self._fetch_json(
                client,
                f"{self._config.base_url}/recording/{rid}",
                {"inc": "releases", "fmt": "json"},
            )

        recording = full.get("recording") or full
        seen: set[str] = set()
        out: list[str] = []
        for title in release_titles(recording):
            folded = title.lower()
            if folded in seen:
                continue
            seen.add(folded)
            out.append(title)
            if len(out) >= max_releases:
                break
        return out

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout,
            headers={
                "User-Agent": self._config.user_agent,
                "Accept": "application/json",
            },
        )

    async def _fetch_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: dict[str, str],
    ) -> dict[str, Any]:
        """Throttled GET returning the decoded JSON body."""
        await self._throttle.wait()
        response = await client.get(url, params=params)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise MusicBrainzError(e.response.status_code, e.response.text) from e
        return response.json()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def performer_artist_ids(recording: dict[str, Any]) -> set[str]:
    """Artist ids attached to a recording by instrument or vocal relations."""
    out: set[str] = set()
    for relation in recording.get("relations") or []:
        kind = (relation.get("type") or "").lower()
        if kind not in PERFORMER_RELATION_TYPES:
            continue
        artist = relation.get("artist") or {}
        if artist.get("id"):
            out.add(artist["id"])
    return out


def release_titles(recording: dict[str, Any]) -> list[str]:
    releases = recording.get("releases") or recording.get("release-list") or []
    return [r["title"] for r in releases if r.get("title")]
