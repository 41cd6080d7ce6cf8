"""Request path normalization for permission lookup.

Permission records store path *patterns* such as ``/api/admin/users/{id}``
while requests arrive with concrete paths such as ``/api/admin/users/42``.
This module turns a concrete path into an ordered list of candidate
patterns (most specific first) and, as a last resort, matches the path
against compiled stored patterns.

Order of candidates:

1. the normalized path exactly as received
2. one candidate per :class:`TrailingSegmentRule`, in table order
3. (done by :func:`match_stored_patterns`) every stored pattern compiled
   with ``[0-9]+`` in place of each placeholder

Malformed paths produce no candidates and never match a stored pattern.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Final, TypeVar

from ..domain.ports.permission import PermissionRecord

PLACEHOLDER_RE: Final[re.Pattern[str]] = re.compile(r"\{[A-Za-z_][A-Za-z0-9_]*\}")

# RFC 3986 pchar. Paths arrive percent-decoded, so a literal "%" is a plain character
_LITERAL_SEGMENT_RE: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9\-._~!$&'()*+,;=:@%]+")
_DOT_SEGMENTS: Final[frozenset[str]] = frozenset({".", ".."})

FALLBACK_PLACEHOLDER_REGEX: Final[str] = "[0-9]+"

P = TypeVar("P", bound=PermissionRecord)


class MalformedPathError(ValueError):
    """Raised when a request path cannot be normalized."""


@dataclass(frozen=True)
class TrailingSegmentRule:
    """Replace the last path segment with ``placeholder`` when it matches ``segment``."""

    name: str
    segment: re.Pattern[str]
    placeholder: str

    def apply(self, segments: Sequence[str]) -> str | None:
        if not segments or not self.segment.fullmatch(segments[-1]):
            return None
        return join_segments((*segments[:-1], self.placeholder))


NUMERIC_ID_RULE: Final = TrailingSegmentRule(
    name="numeric_id",
    segment=re.compile(r"[0-9]+"),
    placeholder="{id}",
)
PRODUCT_CODE_RULE: Final = TrailingSegmentRule(
    name="product_code",
    segment=re.compile(r"[A-Za-z0-9][A-Za-z0-9_\-]*"),
    placeholder="{productCode}",
)

DEFAULT_TRAILING_RULES: Final[tuple[TrailingSegmentRule, ...]] = (
    NUMERIC_ID_RULE,
    PRODUCT_CODE_RULE,
)


def split_path(path: str) -> tuple[str, ...]:
    """Split a concrete request path into its segments.

    Query string and fragment are discarded, as are empty segments, so
    ``/api//users/`` and ``/api/users`` normalize to the same segments.

    Raises:
        MalformedPathError: If the path is not absolute or contains a
            segment that cannot appear in a routed URL.
    """
    if not isinstance(path, str) or not path.startswith("/"):
        raise MalformedPathError(f"path must be absolute: {path!r}")

    path = path.split("#", 1)[0].split("?", 1)[0]
    segments = tuple(segment for segment in path.split("/") if segment)
    for segment in segments:
        if segment in _DOT_SEGMENTS or not _LITERAL_SEGMENT_RE.fullmatch(segment):
            raise MalformedPathError(f"invalid path segment: {segment!r}")
    return segments


def join_segments(segments: Iterable[str]) -> str:
    return "/" + "/".join(segments)


def normalize_path(path: str) -> str:
    return join_segments(split_path(path))


class PathNormalizer:
    """Generate lookup candidates for a concrete path from a rule table."""

    def __init__(self, rules: Sequence[TrailingSegmentRule] = DEFAULT_TRAILING_RULES):
        self.rules = tuple(rules)

    def candidates(self, path: str) -> list[str]:
        try:
            segments = split_path(path)
        except MalformedPathError:
            return []

        ordered: list[str] = [join_segments(segments)]
        for rule in self.rules:
            candidate = rule.apply(segments)
            if candidate is not None and candidate not in ordered:
                ordered.append(candidate)
        return ordered


def is_valid_api_path(api_path: str) -> bool:
    """Check that a stored permission pattern is well formed."""
    if not isinstance(api_path, str) or not api_path.startswith("/"):
        return False
    if api_path == "/":
        return True
    segments = api_path[1:].split("/")
    for segment in segments:
        if PLACEHOLDER_RE.fullmatch(segment):
            continue
        if segment in _DOT_SEGMENTS or not _LITERAL_SEGMENT_RE.fullmatch(segment):
            return False
    return True


def placeholder_count(api_path: str) -> int:
    return len(PLACEHOLDER_RE.findall(api_path))


@lru_cache(maxsize=1024)
def compile_api_path(api_path: str) -> re.Pattern[str]:
    """Compile a stored pattern into a regex matching concrete paths.

    Every ``{placeholder}`` segment matches ``[0-9]+``; literal segments
    match themselves.
    """
    if not is_valid_api_path(api_path):
        raise ValueError(f"invalid api path pattern: {api_path!r}")

    parts = []
    for segment in api_path.split("/"):
        if not segment:
            continue
        if PLACEHOLDER_RE.fullmatch(segment):
            parts.append(FALLBACK_PLACEHOLDER_REGEX)
        else:
            parts.append(re.escape(segment))
    return re.compile("/" + "/".join(parts))


def _specificity(permission: PermissionRecord) -> tuple[int, int, int]:
    literal_length = len(PLACEHOLDER_RE.sub("", permission.api_path))
    return (placeholder_count(permission.api_path), -literal_length, permission.id)


def match_stored_patterns(path: str, permissions: Iterable[P]) -> P | None:
    """Return the most specific stored permission whose pattern matches ``path``.

    Stored patterns that are themselves invalid are skipped.
    """
    try:
        normalized = normalize_path(path)
    except MalformedPathError:
        return None

    for permission in sorted(permissions, key=_specificity):
        try:
            pattern = compile_api_path(permission.api_path)
        except ValueError:
            continue
        if pattern.fullmatch(normalized):
            return permission
    return None
