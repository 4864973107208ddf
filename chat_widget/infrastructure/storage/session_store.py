"""会话级持久化。

挂件只持久化两个槽位：当前 session_id 与有序的消息列表。存储介质的
生命周期对应一次“浏览会话”（storage_scope），存储失败绝不影响内存中的会话：

- StorageBackend: 底层键值存储协议（MemoryStorage / JsonFileStorage）。
- PersistentStore: 对外的 load/save 适配层，负责序列化并吞掉所有异常。
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple
from uuid import uuid4

from chat_widget.config.settings import settings
from chat_widget.domain.exceptions import BusinessError, StorageError
from chat_widget.domain.models import ChatMessage
from chat_widget.domain.state import default_messages
from chat_widget.infrastructure.logging.logger import logger


STORAGE_KEYS = {
    "session": "primecars_chat_session_id",
    "messages": "primecars_chat_messages",
}


class StorageBackend(Protocol):
    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """进程内存储，主要用于测试。"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStorage:
    """每个键一个文件：``<root>/<scope>/<key>.json``，写入使用临时文件 + os.replace。"""

    def __init__(self, root: str | Path | None = None, scope: Optional[str] = None):
        self._root = Path(root or settings.storage_root).resolve()
        self._dir = self._root / (scope or settings.storage_scope)

    @property
    def directory(self) -> Path:
        return self._dir

    def get_item(self, key: str) -> Optional[str]:
        path = self._dir / f"{key}.json"
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(code="STORE_READ_ERROR", message=str(e), key=key)

    def set_item(self, key: str, value: str) -> None:
        path = self._dir / f"{key}.json"
        tmp_path = self._dir / f"{key}.{uuid4().hex}.json.tmp"
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(code="STORE_WRITE_ERROR", message=str(e), key=key)


class PersistentStore:
    """尽力而为的持久化适配层：load 永不抛异常，save 失败静默丢弃。"""

    def __init__(self, backend: StorageBackend):
        self._backend = backend

    def load(self, key: str, fallback: Any) -> Any:
        try:
            raw = self._backend.get_item(key)
            if not raw:
                return fallback
            return json.loads(raw)
        except (BusinessError, ValueError) as e:
            logger.warning("Storage read failed, using fallback", extra={"extra": {"key": key, "error": str(e)}})
            return fallback
        except Exception as e:  # noqa: BLE001 - 存储不可用时同样退回默认值
            logger.warning("Storage unavailable, using fallback", extra={"extra": {"key": key, "error": repr(e)}})
            return fallback

    def save(self, key: str, value: Any) -> None:
        try:
            self._backend.set_item(key, json.dumps(value, ensure_ascii=False))
        except Exception as e:  # noqa: BLE001 - 持久化失败不影响当前会话
            logger.debug("Storage write dropped", extra={"extra": {"key": key, "error": repr(e)}})


def load_messages(store: PersistentStore) -> Tuple[ChatMessage, ...]:
    """读取消息槽位；任何一条不合法都整体退回默认历史。

    恢复出的会话总是空闲态，上次中断遗留的 typing 占位消息直接丢弃。
    """

    data = store.load(STORAGE_KEYS["messages"], None)
    if not isinstance(data, list):
        return default_messages()
    try:
        messages = tuple(ChatMessage.from_dict(item) for item in data)
    except BusinessError as e:
        logger.warning("Persisted messages are malformed", extra={"extra": {"error": e.message}})
        return default_messages()
    return tuple(m for m in messages if not m.is_typing)


def load_session_id(store: PersistentStore) -> str:
    value = store.load(STORAGE_KEYS["session"], "")
    return value if isinstance(value, str) else ""


def save_messages(store: PersistentStore, messages: Tuple[ChatMessage, ...]) -> None:
    payload: List[Dict[str, Any]] = [m.to_dict() for m in messages]
    store.save(STORAGE_KEYS["messages"], payload)


def save_session_id(store: PersistentStore, session_id: str) -> None:
    store.save(STORAGE_KEYS["session"], session_id or "")
