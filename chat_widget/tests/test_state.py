from chat_widget.domain.models import ChatMessage
from chat_widget.domain.state import (
    ConversationState,
    append_message,
    default_messages,
    replace_typing,
    set_draft,
    set_error,
    set_open,
    set_sending,
    set_session_id,
)
from chat_widget.domain.texts import GREETING_ID


def _typing(i):
    return ChatMessage(id=f"typing-{i}", role="agent", text="Escribiendo…", status="typing")


def test_default_messages_has_single_greeting():
    msgs = default_messages()
    assert len(msgs) == 1
    assert msgs[0].id == GREETING_ID
    assert msgs[0].role == "agent"


def test_append_message_is_pure():
    state = ConversationState.initial(default_messages(), "", "stateful")
    msg = ChatMessage(id="user-1", role="user", text="hola")
    new_state = append_message(state, msg)
    assert len(state.messages) == 1
    assert new_state.messages[-1] == msg


def test_replace_typing_removes_every_placeholder():
    state = ConversationState(messages=(ChatMessage(id="u", role="user", text="x"), _typing(1), _typing(2)))
    final = ChatMessage(id="agent-3", role="agent", text="ok")
    new_state = replace_typing(state, final)
    assert new_state.typing_count == 0
    assert [m.id for m in new_state.messages] == ["u", "agent-3"]


def test_replace_typing_without_placeholder_appends():
    state = ConversationState(messages=(ChatMessage(id="u", role="user", text="x"),))
    new_state = replace_typing(state, ChatMessage(id="a", role="agent", text="y"))
    assert [m.id for m in new_state.messages] == ["u", "a"]


def test_set_session_id_ignored_in_stateless_mode():
    state = ConversationState(mode="stateless")
    assert set_session_id(state, "sess-1") is state
    stateful = ConversationState(mode="stateful")
    assert set_session_id(stateful, "sess-1").session_id == "sess-1"


def test_initial_drops_session_in_stateless_mode():
    state = ConversationState.initial(default_messages(), "persisted", "stateless")
    assert state.session_id == ""
    assert ConversationState.initial((), "persisted", "stateful").session_id == "persisted"


def test_ui_fields():
    state = ConversationState()
    state = set_draft(state, "borrador")
    state = set_open(state, True)
    state = set_sending(state, True)
    state = set_error(state, "fallo")
    assert (state.draft, state.is_open, state.is_sending, state.last_error) == ("borrador", True, True, "fallo")
