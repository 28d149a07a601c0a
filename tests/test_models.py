"""Tests for the in-memory snippet and user models."""

from datetime import UTC, datetime, timedelta

import pytest
from argon2 import PasswordHasher

from snippetbox.errors import DuplicateEmailError, InvalidCredentialsError, NoRecordError
from snippetbox.models import LATEST_LIMIT, SnippetModel, UserModel


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 2, 15, 4, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


def _users() -> UserModel:
    return UserModel(hasher=PasswordHasher(time_cost=1, memory_cost=8, parallelism=1))


class TestSnippetModel:
    def test_insert_and_get(self) -> None:
        clock = _Clock()
        model = SnippetModel(clock=clock)
        snippet_id = model.insert("Title", "Content", 7)
        snippet = model.get(snippet_id)
        assert snippet.title == "Title"
        assert snippet.content == "Content"
        assert snippet.created == clock.now
        assert snippet.expires == clock.now + timedelta(days=7)

    def test_ids_increase(self) -> None:
        model = SnippetModel()
        assert model.insert("a", "a", 1) == 1
        assert model.insert("b", "b", 1) == 2

    def test_missing_raises(self) -> None:
        with pytest.raises(NoRecordError):
            SnippetModel().get(42)

    def test_expired_raises(self) -> None:
        clock = _Clock()
        model = SnippetModel(clock=clock)
        snippet_id = model.insert("a", "a", 1)
        clock.now += timedelta(days=1)
        with pytest.raises(NoRecordError):
            model.get(snippet_id)

    def test_latest_newest_first_and_limited(self) -> None:
        model = SnippetModel()
        for i in range(LATEST_LIMIT + 2):
            model.insert(f"s{i}", "x", 365)
        latest = model.latest()
        assert len(latest) == LATEST_LIMIT
        assert latest[0].title == f"s{LATEST_LIMIT + 1}"

    def test_latest_skips_expired(self) -> None:
        clock = _Clock()
        model = SnippetModel(clock=clock)
        model.insert("short", "x", 1)
        model.insert("long", "x", 7)
        clock.now += timedelta(days=2)
        assert [s.title for s in model.latest()] == ["long"]


class TestUserModel:
    def test_insert_and_authenticate(self) -> None:
        users = _users()
        user_id = users.insert("Alice", "alice@example.com", "pa55word!")
        assert users.authenticate("alice@example.com", "pa55word!") == user_id

    def test_password_not_stored_in_clear(self) -> None:
        users = _users()
        user_id = users.insert("Alice", "alice@example.com", "pa55word!")
        stored = users._rows[user_id].hashed_password
        assert "pa55word!" not in stored
        assert stored.startswith("$argon2id$")

    def test_email_lookup_case_insensitive(self) -> None:
        users = _users()
        user_id = users.insert("Alice", "Alice@Example.com", "pa55word!")
        assert users.authenticate("alice@example.com", "pa55word!") == user_id

    def test_duplicate_email(self) -> None:
        users = _users()
        users.insert("Alice", "alice@example.com", "pa55word!")
        with pytest.raises(DuplicateEmailError):
            users.insert("Other", "ALICE@example.com", "different1")

    def test_wrong_password(self) -> None:
        users = _users()
        users.insert("Alice", "alice@example.com", "pa55word!")
        with pytest.raises(InvalidCredentialsError):
            users.authenticate("alice@example.com", "wrong-password")

    def test_unknown_email(self) -> None:
        with pytest.raises(InvalidCredentialsError):
            _users().authenticate("nobody@example.com", "pa55word!")

    def test_exists(self) -> None:
        users = _users()
        user_id = users.insert("Alice", "alice@example.com", "pa55word!")
        assert users.exists(user_id)
        assert not users.exists(user_id + 1)
