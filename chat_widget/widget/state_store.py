from typing import Callable, List, Optional

from chat_widget.domain import state as transitions
from chat_widget.domain.models import ChatMessage, Mode
from chat_widget.domain.state import ConversationState
from chat_widget.infrastructure.logging.logger import logger
from chat_widget.infrastructure.storage.session_store import (
    PersistentStore,
    load_messages,
    load_session_id,
    save_messages,
    save_session_id,
)


Listener = Callable[[ConversationState], None]


class WidgetStateStore:
    """持有当前 ConversationState，并在变更后同步持久化与通知订阅者。

    消息列表与 session_id 只在确实发生变化时才写入存储；
    草稿、面板开关、发送中、错误文案属于纯 UI 状态，不落盘。
    """

    def __init__(self, initial: ConversationState, store: Optional[PersistentStore] = None):
        self._state = initial
        self._store = store
        self._listeners: List[Listener] = []

    @classmethod
    def restore(cls, store: PersistentStore, mode: Mode) -> "WidgetStateStore":
        """从持久化槽位恢复；数据缺失或损坏时退回默认问候语和空 session。"""

        messages = load_messages(store)
        session_id = load_session_id(store)
        return cls(ConversationState.initial(messages, session_id, mode), store)

    @property
    def state(self) -> ConversationState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- 持久化的变更 ----------------------------------------------

    def append_message(self, message: ChatMessage) -> None:
        self._apply(transitions.append_message(self._state, message))

    def replace_typing(self, message: ChatMessage) -> None:
        self._apply(transitions.replace_typing(self._state, message))

    def set_session_id(self, session_id: str) -> None:
        self._apply(transitions.set_session_id(self._state, session_id))

    # ---- 纯 UI 状态 -------------------------------------------------

    def set_draft(self, text: str) -> None:
        self._apply(transitions.set_draft(self._state, text))

    def set_open(self, is_open: bool) -> None:
        self._apply(transitions.set_open(self._state, is_open))

    def set_sending(self, is_sending: bool) -> None:
        self._apply(transitions.set_sending(self._state, is_sending))

    def set_error(self, text: str) -> None:
        self._apply(transitions.set_error(self._state, text))

    # ---- internals --------------------------------------------------

    def _apply(self, new_state: ConversationState) -> None:
        old = self._state
        if new_state == old:
            return
        self._state = new_state
        if self._store is not None:
            if new_state.messages != old.messages:
                save_messages(self._store, new_state.messages)
            if new_state.session_id != old.session_id:
                save_session_id(self._store, new_state.session_id)
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:  # noqa: BLE001 - 渲染异常不能打断请求流程
                logger.exception("State listener failed")
