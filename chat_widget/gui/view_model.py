"""Toolkit-free helpers that turn ConversationState into display data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from chat_widget.domain.state import ConversationState
from chat_widget.domain import texts


@dataclass(frozen=True)
class MessageLine:
    """一行待渲染的消息。tag 用于 Text 控件的颜色标记。"""

    message_id: str
    avatar: str
    text: str
    tag: str


def render_lines(state: ConversationState) -> List[MessageLine]:
    lines: List[MessageLine] = []
    for msg in state.messages:
        avatar = texts.AVATAR_AGENT if msg.role == "agent" else texts.AVATAR_USER
        tag = msg.status or msg.role
        lines.append(MessageLine(message_id=msg.id, avatar=avatar, text=msg.text, tag=tag))
    return lines


def header_subtitle(state: ConversationState) -> str:
    return texts.SUBTITLE_STATELESS if state.is_stateless else texts.SUBTITLE_STATEFUL


def session_badge(state: ConversationState) -> str:
    if state.is_stateless or not state.session_id:
        return ""
    return f"ID: {state.session_id}"


def send_button_label(state: ConversationState) -> str:
    return texts.SENDING_LABEL if state.is_sending else texts.SEND_LABEL


def can_send(state: ConversationState) -> bool:
    return not state.is_sending and bool(state.draft.strip())
