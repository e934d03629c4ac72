"""대화 세션 상태 저장소 테스트."""

from __future__ import annotations

import pytest

from hashkorea.conversation.session import GREETING_MESSAGES, ChatSession, SessionBusyError, SessionStore, greeting_for
from hashkorea.schemas.chat import CollectedInfo
from hashkorea.schemas.enums import PlaceCategory, Sender
from hashkorea.schemas.place import MapPosition, Place


def _place() -> Place:
    return Place(id="p1", name="카페", position=MapPosition(lat=37.5, lng=126.9), category=PlaceCategory.CAFE)


def test_initialize_adds_greeting_once() -> None:
    session = ChatSession()

    session.initialize()
    session.initialize()

    assert len(session.messages) == 1
    assert session.messages[0].sender == Sender.ASSISTANT
    assert session.messages[0].text == GREETING_MESSAGES["en"]


def test_messages_are_append_only_and_immutable() -> None:
    session = ChatSession()
    first = session.add_message(Sender.USER, "홍대 카페")
    second = session.add_message(Sender.ASSISTANT, "찾아볼게요")

    assert session.messages == [first, second]
    assert first.id != second.id
    assert first.timestamp <= second.timestamp
    with pytest.raises(Exception):
        first.text = "changed"


def test_update_collected_info_merges() -> None:
    session = ChatSession()
    session.update_collected_info(CollectedInfo(location="홍대"))
    session.update_collected_info(CollectedInfo(purpose="카페"))

    assert session.collected_info == CollectedInfo(location="홍대", purpose="카페")


def test_clear_resets_everything() -> None:
    session = ChatSession()
    session.initialize()
    session.update_collected_info(CollectedInfo(location="홍대"))
    session.set_places([_place()])

    session.clear()

    assert session.messages == []
    assert session.collected_info == CollectedInfo()
    assert session.places == []


def test_recent_history_maps_roles_and_limits() -> None:
    session = ChatSession()
    session.add_message(Sender.ASSISTANT, "안녕하세요")
    session.add_message(Sender.USER, "홍대")
    session.add_message(Sender.ASSISTANT, "무엇을 찾으세요?")

    history = session.recent_history(2)

    assert [(message.role, message.content) for message in history] == [
        ("user", "홍대"),
        ("assistant", "무엇을 찾으세요?"),
    ]
    assert session.recent_history(0) == []


def test_turn_sets_and_releases_loading_flag() -> None:
    session = ChatSession()

    with session.turn():
        assert session.is_loading is True
        with pytest.raises(SessionBusyError):
            with session.turn():
                pass

    assert session.is_loading is False


def test_turn_releases_loading_flag_on_error() -> None:
    session = ChatSession()

    with pytest.raises(RuntimeError):
        with session.turn():
            raise RuntimeError("boom")

    assert session.is_loading is False


def test_session_store_create_get_delete() -> None:
    store = SessionStore()

    session = store.create()

    assert store.get(session.id) is session
    assert session.messages[0].text == GREETING_MESSAGES["en"]
    assert len(store) == 1
    assert store.delete(session.id) is True
    assert store.delete(session.id) is False
    assert store.get(session.id) is None


def test_to_response_snapshot() -> None:
    session = ChatSession("fixed-id")
    session.set_places([_place()])

    response = session.to_response().model_dump(by_alias=True, mode="json")

    assert response["id"] == "fixed-id"
    assert response["isLoading"] is False
    assert response["places"][0]["category"] == "cafe"
    assert response["collectedInfo"] == {"location": None, "purpose": None, "preferences": None}


class _FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.parametrize(
    ("locale", "expected"),
    [("ko", "ko"), ("ja-JP", "ja"), ("zh", "zh"), ("fr", "en"), (None, "en")],
)
def test_greeting_follows_session_locale(locale, expected) -> None:
    store = SessionStore()

    session = store.create(locale)

    assert session.locale == expected
    assert session.messages[0].text == GREETING_MESSAGES[expected]


def test_cleared_session_greets_again_in_its_locale() -> None:
    session = ChatSession(locale="ko")
    session.initialize()

    session.clear()
    session.initialize()

    assert [message.text for message in session.messages] == [greeting_for("ko")]


def test_idle_sessions_expire() -> None:
    clock = _FakeClock()
    store = SessionStore(idle_ttl_seconds=60, clock=clock)
    stale = store.create()
    clock.now += 30
    fresh = store.create()

    clock.now += 45

    assert store.get(stale.id) is None
    assert store.get(fresh.id) is fresh
    assert len(store) == 1


def test_access_extends_session_lifetime() -> None:
    clock = _FakeClock()
    store = SessionStore(idle_ttl_seconds=60, clock=clock)
    session = store.create()

    for _ in range(5):
        clock.now += 50
        assert store.get(session.id) is session


def test_store_is_bounded_by_max_sessions() -> None:
    store = SessionStore(max_sessions=100)

    created = [store.create() for _ in range(5000)]

    assert len(store) == 100
    assert store.get(created[0].id) is None
    assert store.get(created[-1].id) is created[-1]


def test_overflow_evicts_least_recently_used_first() -> None:
    store = SessionStore(max_sessions=2)
    first = store.create()
    second = store.create()
    store.get(first.id)

    third = store.create()

    assert store.get(second.id) is None
    assert store.get(first.id) is first
    assert store.get(third.id) is third


def test_session_with_turn_in_flight_is_never_evicted() -> None:
    clock = _FakeClock()
    store = SessionStore(idle_ttl_seconds=60, max_sessions=1, clock=clock)
    busy = store.create()

    with busy.turn():
        clock.now += 600
        other = store.create()

        assert store.evict_expired() == 0
        assert store.get(busy.id) is busy
        assert store.get(other.id) is other

    clock.now += 600
    store.evict_expired()
    assert store.get(busy.id) is None
