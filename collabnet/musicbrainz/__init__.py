"""MusicBrainz-backed edge verification."""

from collabnet.musicbrainz.rate_limit import DiskCache, MinIntervalThrottle
from collabnet.musicbrainz.verification import (
    EdgeVerification,
    MusicBrainzConfig,
    MusicBrainzError,
    MusicBrainzVerifier,
    RecordingMatch,
)

__all__ = [
    "DiskCache",
    "EdgeVerification",
    "MinIntervalThrottle",
    "MusicBrainzConfig",
    "MusicBrainzError",
    "MusicBrainzVerifier",
    "RecordingMatch",
]
