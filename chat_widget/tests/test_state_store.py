from chat_widget.domain.models import ChatMessage
from chat_widget.domain.state import ConversationState, default_messages
from chat_widget.infrastructure.storage.session_store import (
    STORAGE_KEYS,
    MemoryStorage,
    PersistentStore,
    save_messages,
    save_session_id,
)
from chat_widget.widget.state_store import WidgetStateStore


class RecordingStorage(MemoryStorage):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = []

    def set_item(self, key, value):
        self.writes.append(key)
        super().set_item(key, value)


def test_restore_from_empty_storage_uses_defaults():
    store = WidgetStateStore.restore(PersistentStore(MemoryStorage()), "stateful")
    assert store.state.messages == default_messages()
    assert store.state.session_id == ""


def test_restore_reads_persisted_slots():
    persistent = PersistentStore(MemoryStorage())
    msgs = (ChatMessage(id="user-1", role="user", text="hola"),)
    save_messages(persistent, msgs)
    save_session_id(persistent, "sess-1")

    restored = WidgetStateStore.restore(persistent, "stateful")
    assert restored.state.messages == msgs
    assert restored.state.session_id == "sess-1"
    assert WidgetStateStore.restore(persistent, "stateless").state.session_id == ""


def test_only_changed_slots_are_persisted():
    backend = RecordingStorage()
    store = WidgetStateStore(ConversationState(), PersistentStore(backend))

    store.set_draft("hola")
    store.set_open(True)
    store.set_sending(True)
    store.set_error("x")
    assert backend.writes == []

    store.append_message(ChatMessage(id="user-1", role="user", text="hola"))
    assert backend.writes == [STORAGE_KEYS["messages"]]

    store.set_session_id("sess-1")
    store.set_session_id("sess-1")
    assert backend.writes == [STORAGE_KEYS["messages"], STORAGE_KEYS["session"]]


def test_stateless_session_id_never_persisted():
    backend = RecordingStorage()
    store = WidgetStateStore(ConversationState(mode="stateless"), PersistentStore(backend))
    store.set_session_id("sess-1")
    assert store.state.session_id == ""
    assert backend.writes == []


def test_listeners_notified_and_unsubscribed():
    store = WidgetStateStore(ConversationState())
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(s.draft))

    store.set_draft("a")
    store.set_draft("a")
    unsubscribe()
    store.set_draft("b")

    assert seen == ["a"]


def test_failing_listener_does_not_break_mutation():
    store = WidgetStateStore(ConversationState())

    def boom(_state):
        raise RuntimeError("render failed")

    store.subscribe(boom)
    store.set_open(True)
    assert store.state.is_open is True


def test_restore_never_starts_with_typing_placeholder():
    persistent = PersistentStore(MemoryStorage())
    save_messages(persistent, (
        ChatMessage(id="user-1", role="user", text="hola"),
        ChatMessage(id="typing-2", role="agent", text="Escribiendo…", status="typing"),
    ))

    restored = WidgetStateStore.restore(persistent, "stateful")
    assert restored.state.typing_count == 0
    assert restored.state.is_sending is False
    assert [m.id for m in restored.state.messages] == ["user-1"]
