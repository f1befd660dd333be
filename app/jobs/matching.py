"""
Correlation keys and the strategies used to match them.

A shared status endpoint reports every job of a client at once, so the
correlation key is the only thing separating one job's results from
another's. The stem of the uploaded filename is what the service echoes
back in result URLs; ``unique_key`` adds a random suffix to that stem so
that ``photo1`` no longer claims the results of ``photo10``.
"""

from __future__ import annotations

import secrets
from pathlib import PurePath
from typing import Literal
from urllib.parse import urlsplit

from app.jobs.protocols import KeyMatcher

CorrelationStrategy = Literal["unique", "stem"]
MatchStrategy = Literal["substring", "basename"]

_KEY_SEPARATORS = ("_", "-", ".")


def substring_matcher(correlation_key: str, identifier: str) -> bool:
    """Match when the key appears anywhere in the identifier."""
    return correlation_key in identifier


def basename_matcher(correlation_key: str, identifier: str) -> bool:
    """Match on the last path segment of the identifier only.

    The segment must equal the key or start with the key followed by
    ``_``, ``-`` or ``.``. Query strings and host names are ignored.
    """
    path = urlsplit(identifier).path or identifier
    name = path.rstrip("/").rsplit("/", 1)[-1]
    if name == correlation_key:
        return True
    return any(name.startswith(correlation_key + sep) for sep in _KEY_SEPARATORS)


def stem_key(filename: str) -> str:
    """Return the filename without directories and final extension."""
    return PurePath(filename).stem


def unique_key(filename: str, token_bytes: int = 4) -> str:
    """Return ``<stem>-<random hex>`` for the given filename."""
    return f"{stem_key(filename)}-{secrets.token_hex(token_bytes)}"


def make_correlation_key(filename: str, strategy: CorrelationStrategy = "unique") -> str:
    """Build the correlation key for an upload of ``filename``.

    Raises:
        ValueError: If the strategy is unknown or the key would be empty.
    """
    if strategy == "unique":
        key = unique_key(filename)
    elif strategy == "stem":
        key = stem_key(filename)
    else:
        raise ValueError(f"Unknown correlation strategy: {strategy}")

    if not key or key.startswith("-"):
        raise ValueError(f"Cannot derive a correlation key from {filename!r}")
    return key


def upload_filename(correlation_key: str, filename: str) -> str:
    """Name to upload ``filename`` under so result URLs carry the key."""
    return f"{correlation_key}{PurePath(filename).suffix}"


MATCHERS: dict[str, KeyMatcher] = {
    "substring": substring_matcher,
    "basename": basename_matcher,
}


def get_matcher(strategy: MatchStrategy = "substring") -> KeyMatcher:
    """Look up a key matcher by name.

    Raises:
        ValueError: If the strategy is unknown.
    """
    try:
        return MATCHERS[strategy]
    except KeyError:
        raise ValueError(f"Unknown match strategy: {strategy}") from None
