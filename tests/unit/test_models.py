"""Unit tests for forkguard models and rotation configuration."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import TypeAdapter, ValidationError

from forkguard.models import (
    Action,
    ConsumeResult,
    CookieDirective,
    CookieOptions,
    CreateAction,
    DeleteAction,
    ReplaceAction,
    RotationConfig,
    SameSite,
    SessionState,
    SessionUpdate,
)
from tests.conftest import T0, make_record


class TestSessionRecord:
    def test_naive_datetimes_are_treated_as_utc(self) -> None:
        record = make_record(session_expires_at=datetime(2023, 10, 1, 5, 0))
        assert record.session_expires_at == datetime(2023, 10, 1, 5, 0, tzinfo=timezone.utc)  # noqa: UP017

    def test_other_offsets_are_converted_to_utc(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        record = make_record(token_expires_at=datetime(2023, 10, 1, 2, 10, tzinfo=plus_two))
        assert record.token_expires_at == T0 + timedelta(minutes=10)
        assert record.token_expires_at.utcoffset() == timedelta(0)

    def test_is_frozen(self) -> None:
        record = make_record()
        with pytest.raises(ValidationError):
            record.latest_token_hash = "x"  # type: ignore[misc]

    def test_apply_sets_slots_when_given(self) -> None:
        record = make_record(latest_token="a")
        update = SessionUpdate(
            latest_token_hash="new",
            previous_token_hash=record.latest_token_hash,
            session_expires_at=T0 + timedelta(hours=6),
            token_expires_at=T0 + timedelta(minutes=20),
        )
        updated = record.apply(update)

        assert updated.token_slots() == ("new", record.latest_token_hash)
        assert updated.session_expires_at == T0 + timedelta(hours=6)
        assert updated.application_data == record.application_data

    def test_apply_leaves_unset_slots_alone(self) -> None:
        record = make_record(latest_token="a", previous_token="b")
        updated = record.apply(
            SessionUpdate(
                session_expires_at=T0 + timedelta(hours=6),
                token_expires_at=T0 + timedelta(minutes=20),
            )
        )
        assert updated.token_slots() == record.token_slots()
        assert updated.token_expires_at == T0 + timedelta(minutes=20)


class TestRotationConfig:
    def test_defaults(self) -> None:
        config = RotationConfig()
        assert config.session_ttl == timedelta(days=7)
        assert config.token_ttl == timedelta(minutes=2)
        assert config.cookie_name == "session_id"
        assert config.same_site is SameSite.STRICT
        assert config.cookie_path == "/"

    def test_token_ttl_must_be_shorter_than_session_ttl(self) -> None:
        with pytest.raises(ValidationError, match="token_ttl must be less than session_ttl"):
            RotationConfig(session_ttl=timedelta(minutes=5), token_ttl=timedelta(minutes=5))

    def test_token_ttl_must_be_positive(self) -> None:
        with pytest.raises(ValidationError, match="token_ttl must be positive"):
            RotationConfig(token_ttl=timedelta(0))

    def test_accepts_seconds(self) -> None:
        config = RotationConfig(session_ttl=3600, token_ttl=60)
        assert config.session_ttl == timedelta(hours=1)
        assert config.token_ttl == timedelta(minutes=1)


class TestCookieDirective:
    def test_security_attributes_default_on(self) -> None:
        options = CookieOptions()
        assert options.http_only is True
        assert options.secure is True

    def test_is_logout(self) -> None:
        logout = CookieDirective(name="s", value="", options=CookieOptions(max_age=0))
        session = CookieDirective(name="s", value="a:b", options=CookieOptions(expires=T0))
        assert logout.is_logout
        assert not session.is_logout


class TestActions:
    def test_discriminated_by_type(self) -> None:
        adapter = TypeAdapter(Action)
        action = adapter.validate_python({"type": "delete", "session_id_hash": "h"})
        assert isinstance(action, DeleteAction)

    def test_replace_round_trips_through_json(self) -> None:
        adapter = TypeAdapter(Action)
        action = ReplaceAction(
            session_id_hash="h",
            update=SessionUpdate(
                latest_token_hash="n",
                session_expires_at=T0,
                token_expires_at=T0,
            ),
        )
        restored = adapter.validate_json(adapter.dump_json(action))
        assert restored == action

    def test_create_carries_record(self) -> None:
        record = make_record()
        assert CreateAction(record=record).record is record


class TestConsumeResult:
    def test_application_data_only_when_active(self) -> None:
        record = make_record(application_data={"user_id": "u-9"})
        active = ConsumeResult(state=SessionState.ACTIVE, record=record)
        forked = ConsumeResult(state=SessionState.FORKED, record=record)

        assert active.application_data == {"user_id": "u-9"}
        assert forked.application_data is None
        assert not forked.is_active

    def test_state_values(self) -> None:
        assert SessionState.FORKED.value == "Forked"
        assert SessionState.COOKIE_MISSING.value == "CookieMissing"
