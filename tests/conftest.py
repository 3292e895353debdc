"""Pytest configuration and shared fixtures."""

import pytest

from sourcing.domain.entities.note import DirectoryUser


@pytest.fixture
def directory_users():
    return [
        DirectoryUser(id="u-jane", first_name="Jane", last_name="Doe", email="jane@example.com"),
        DirectoryUser(id="u-john", first_name="John", last_name="Smith", email="john@example.com"),
        DirectoryUser(id="u-maria", first_name="Maria", last_name="Lopez"),
    ]


@pytest.fixture
def sample_note_text():
    return "@Jane Doe please review; cc @John Smith and @Nobody Here"
