"""MentionPolicy — find ``@First Last`` references in note text."""

from __future__ import annotations

import hashlib
import re
from collections.abc import Iterable

from sourcing.domain.entities.note import DirectoryUser

MENTION_PATTERN = re.compile(r"@([A-Za-z]+)\s+([A-Za-z]+)")


def extract_mention_names(text: str) -> list[tuple[str, str]]:
    """Return (first, last) pairs in the order they appear."""
    return [(m.group(1), m.group(2)) for m in MENTION_PATTERN.finditer(text or "")]


def resolve_mentions(text: str, directory: Iterable[DirectoryUser]) -> list[DirectoryUser]:
    """Resolve mentions against the directory.

    Matching is case-insensitive on (first_name, last_name). A name that
    matches no entry, or more than one, is dropped without error. The result
    holds each identity once, in order of first mention.
    """
    index: dict[tuple[str, str], list[DirectoryUser]] = {}
    for user in directory:
        key = (user.first_name.strip().lower(), user.last_name.strip().lower())
        index.setdefault(key, []).append(user)

    resolved: list[DirectoryUser] = []
    seen: set[str] = set()
    for first, last in extract_mention_names(text):
        matches = index.get((first.lower(), last.lower()), [])
        if len(matches) != 1:
            continue
        user = matches[0]
        if user.id not in seen:
            seen.add(user.id)
            resolved.append(user)
    return resolved


def notification_key(note_id: int, recipient_id: str) -> str:
    """Idempotency key for the mention notification of one note and recipient."""
    return hashlib.sha256(f"{note_id}:{recipient_id}".encode()).hexdigest()
