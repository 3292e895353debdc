"""Tests for mention extraction and resolution."""

from sourcing.domain.entities.note import DirectoryUser
from sourcing.domain.policies.mentions import (
    extract_mention_names,
    notification_key,
    resolve_mentions,
)


def test_extract_in_order(sample_note_text):
    assert extract_mention_names(sample_note_text) == [
        ("Jane", "Doe"),
        ("John", "Smith"),
        ("Nobody", "Here"),
    ]


def test_extract_ignores_single_names():
    assert extract_mention_names("thanks @Jane") == []
    assert extract_mention_names("") == []


def test_unknown_names_are_dropped(sample_note_text, directory_users):
    resolved = resolve_mentions(sample_note_text, directory_users)
    assert [u.id for u in resolved] == ["u-jane", "u-john"]


def test_matching_is_case_insensitive(directory_users):
    resolved = resolve_mentions("@jane DOE", directory_users)
    assert [u.id for u in resolved] == ["u-jane"]


def test_repeated_mentions_resolve_once(directory_users):
    resolved = resolve_mentions("@Jane Doe ... @John Smith ... @jane doe", directory_users)
    assert [u.id for u in resolved] == ["u-jane", "u-john"]


def test_ambiguous_name_is_dropped(directory_users):
    twins = directory_users + [DirectoryUser(id="u-jane-2", first_name="Jane", last_name="Doe")]
    resolved = resolve_mentions("@Jane Doe and @Maria Lopez", twins)
    assert [u.id for u in resolved] == ["u-maria"]


def test_notification_key_is_stable_per_recipient():
    assert notification_key(42, "u-jane") == notification_key(42, "u-jane")
    assert notification_key(42, "u-jane") != notification_key(42, "u-john")
    assert notification_key(42, "u-jane") != notification_key(43, "u-jane")
    assert len(notification_key(1, "x")) == 64
