try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from datetime import datetime, timedelta, timezone

from tiktok_relay.clients.token_store import InMemoryTokenStore
from tiktok_relay.models.token import parse_scope


def test_get_unknown_subject_returns_none(token_store: InMemoryTokenStore) -> None:
    assert token_store.get("nobody") is None
    assert len(token_store) == 0


def test_put_overwrites_without_merging(token_store, make_record) -> None:
    token_store.put(
        make_record("U1", access_token="first", refresh_token="old-refresh",
                    scope=("user.info.basic", "video.publish"))
    )
    token_store.put(
        make_record("U1", access_token="second", refresh_token=None,
                    scope=("user.info.basic",))
    )

    stored = token_store.get("U1")
    assert stored is not None
    assert stored.access_token == "second"
    assert stored.refresh_token is None
    assert stored.scope == frozenset({"user.info.basic"})
    assert len(token_store) == 1


def test_expired_records_remain_readable(token_store, make_record) -> None:
    token_store.put(make_record("U2", expires_in=1))
    later = datetime.now(timezone.utc) + timedelta(seconds=5)

    stored = token_store.get("U2")
    assert stored is not None
    assert stored.is_expired(later)
    assert stored.seconds_remaining(later) == 0


def test_items_lists_every_subject(token_store, make_record) -> None:
    token_store.put(make_record("a"))
    token_store.put(make_record("b"))

    assert sorted(record.open_id for record in token_store.items()) == ["a", "b"]


def test_parse_scope_accepts_commas_spaces_and_lists() -> None:
    assert parse_scope("user.info.basic,video.publish") == {
        "user.info.basic",
        "video.publish",
    }
    assert parse_scope("user.info.basic video.upload, ") == {
        "user.info.basic",
        "video.upload",
    }
    assert parse_scope(["video.publish", " "]) == {"video.publish"}
    assert parse_scope(None) == frozenset()
