import asyncio

import pytest

from chat_widget.domain.models import AgentReply, MessageIdFactory
from chat_widget.domain.state import ConversationState, default_messages
from chat_widget.infrastructure.storage.session_store import MemoryStorage, PersistentStore
from chat_widget.widget.config import WidgetConfig
from chat_widget.widget.controller import ChatController
from chat_widget.widget.state_store import WidgetStateStore


class FakeAgentClient:
    """Agent 客户端替身：记录请求体，按预设返回结果或抛异常。"""

    endpoint = "http://agent.test/api/v1/agent/chat"

    def __init__(self, reply=None, error=None, gate=None):
        self.reply = reply or AgentReply()
        self.error = error
        self.gate = gate
        self.calls = []

    async def send(self, body):
        self.calls.append(body)
        await asyncio.sleep(0)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.reply


class StepClock:
    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def make_controller(memory_storage):
    def factory(client=None, mode="stateful", session_id="", messages=None, redact_content=False):
        store = PersistentStore(memory_storage)
        initial = ConversationState.initial(
            messages if messages is not None else default_messages(),
            session_id,
            mode,
        )
        state_store = WidgetStateStore(initial, store)
        config = WidgetConfig(base_url="http://agent.test", mode=mode, redact_content=redact_content)
        return ChatController(
            state_store,
            client or FakeAgentClient(),
            config,
            id_factory=MessageIdFactory(clock=StepClock()),
        )

    return factory


@pytest.fixture
def fake_client():
    return FakeAgentClient
