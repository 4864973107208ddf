"""会话状态及其纯函数式变换。

ConversationState 是挂件的唯一数据源；下面每个变换函数都接收旧状态、
返回新状态，不做任何 IO。持久化等副作用由 WidgetStateStore 负责。
"""

from dataclasses import dataclass, replace
from typing import Iterable, Tuple

from chat_widget.domain.models import ChatMessage, Mode
from chat_widget.domain.texts import GREETING_ID, GREETING_TEXT


def default_messages() -> Tuple[ChatMessage, ...]:
    """无持久化记录时的初始历史：只有一条问候语。"""
    return (ChatMessage(id=GREETING_ID, role="agent", text=GREETING_TEXT),)


@dataclass(frozen=True)
class ConversationState:
    messages: Tuple[ChatMessage, ...] = ()
    session_id: str = ""
    mode: Mode = "stateful"
    is_open: bool = False
    draft: str = ""
    is_sending: bool = False
    last_error: str = ""

    @classmethod
    def initial(cls, messages: Iterable[ChatMessage], session_id: str, mode: Mode) -> "ConversationState":
        return cls(
            messages=tuple(messages),
            session_id="" if mode == "stateless" else session_id,
            mode=mode,
        )

    @property
    def is_stateless(self) -> bool:
        return self.mode == "stateless"

    @property
    def typing_count(self) -> int:
        return sum(1 for m in self.messages if m.is_typing)


def append_message(state: ConversationState, message: ChatMessage) -> ConversationState:
    return replace(state, messages=state.messages + (message,))


def replace_typing(state: ConversationState, message: ChatMessage) -> ConversationState:
    """移除所有 typing 占位消息，再追加最终消息。"""
    kept = tuple(m for m in state.messages if not m.is_typing)
    return replace(state, messages=kept + (message,))


def set_session_id(state: ConversationState, session_id: str) -> ConversationState:
    # 无状态模式下 session_id 永远保持为空
    if state.is_stateless:
        return state
    return replace(state, session_id=session_id)


def set_draft(state: ConversationState, text: str) -> ConversationState:
    return replace(state, draft=text)


def set_open(state: ConversationState, is_open: bool) -> ConversationState:
    return replace(state, is_open=is_open)


def set_sending(state: ConversationState, is_sending: bool) -> ConversationState:
    return replace(state, is_sending=is_sending)


def set_error(state: ConversationState, text: str) -> ConversationState:
    return replace(state, last_error=text)
