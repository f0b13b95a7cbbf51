"""
Name Resolver

Match a name typed on the command line against configured categories or suppliers. Anything with
a 'name' attribute can be resolved.

The score is deliberately simple: lower-case both strings and count the characters that are equal
at the same index, up to the length of the shorter string. This is not an edit distance, so
"natrue" only scores 3 against "nature". Given the best scoring entry:

    score == len(query)          -> the entry is returned
    score / len(query) >= 0.5    -> AmbiguousName, suggesting the best entry
    otherwise                    -> UnknownName, suggesting the five best entries

An empty query scores 0 against everything, which equals its length, so it resolves to the first
configured entry. Ties keep the configured order because sorting is stable.
"""

from typing import NamedTuple, Any
from collections.abc import Sequence

MAX_SUGGESTIONS = 5


class ResolutionError(Exception):
    """Raised when a name cannot be resolved to a configured entry."""

    def __init__(self, kind: str, query: str, msg: str):
        self.kind = kind
        self.query = query
        super().__init__(msg)


class NoCandidatesConfigured(ResolutionError):
    """Raised when there is nothing configured to resolve against."""

    def __init__(self, kind: str, query: str = ""):
        super().__init__(
            kind, query, f"No {plural(kind)} defined in config file."
        )


class AmbiguousName(ResolutionError):
    """Raised when the query is a near miss of a single entry."""

    def __init__(self, kind: str, query: str, suggestion: str):
        self.suggestion = suggestion
        self.suggestions = [suggestion]
        super().__init__(
            kind, query, f"No {kind} for name: {query}, did you mean: {suggestion}?"
        )


class UnknownName(ResolutionError):
    """Raised when nothing comes close to the query."""

    def __init__(self, kind: str, query: str, suggestions: list[str]):
        self.suggestions = suggestions
        listing = "".join(f"\n- {name}" for name in suggestions)
        super().__init__(
            kind,
            query,
            f"No {kind} for name: {query}, did you mean one of these:{listing}",
        )


class MatchCandidate(NamedTuple):
    entry: Any
    score: int


def plural(kind: str) -> str:
    if kind.endswith("y"):
        return f"{kind[:-1]}ies"
    return f"{kind}s"


def similarity(name: str, query: str) -> int:
    """
    Count index-aligned characters that match case-insensitively.
    """

    return sum(a == b for a, b in zip(name.lower(), query.lower()))


def rank(candidates: Sequence, query: str) -> list[MatchCandidate]:
    """
    Score every candidate against query, best first. Equal scores keep their input order.
    """

    scored = [MatchCandidate(entry, similarity(entry.name, query)) for entry in candidates]
    return sorted(scored, key=lambda candidate: candidate.score, reverse=True)


def resolve(candidates: Sequence, query: str, kind: str = "entry"):
    """
    Return the entry in candidates that query names. Raise a ResolutionError subclass describing
    why not otherwise. 'kind' is only used for messages, e.g. "category" or "supplier".
    """

    if not candidates:
        raise NoCandidatesConfigured(kind, query)

    ranking = rank(candidates, query)
    best, score = ranking[0]

    if score == len(query):
        return best

    if score / len(query) >= 0.5:
        raise AmbiguousName(kind, query, best.name)

    raise UnknownName(
        kind, query, [candidate.entry.name for candidate in ranking[:MAX_SUGGESTIONS]]
    )
