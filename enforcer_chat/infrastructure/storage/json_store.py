import json
import os
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4

from enforcer_chat.config.settings import settings
from enforcer_chat.domain.credentials import CREDENTIAL_KEY, CredentialStore
from enforcer_chat.domain.exceptions import BusinessError


class JsonKeyValueStore:
    """以单个 JSON 文件实现的字符串键值存储，相当于桌面端的 localStorage。"""

    FILE_NAME = "local_storage.json"

    def __init__(self, root: str | Path | None = None):
        self._root = Path(root or settings.storage_root).resolve()
        self._root.mkdir(parents=True, exist_ok=True)
        self._path = self._root / self.FILE_NAME

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def _read(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise BusinessError(code="STORE_READ_ERROR", message=str(e))
        if not isinstance(data, dict):
            raise BusinessError(code="STORE_READ_ERROR", message=f"{self._path} is not a JSON object")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        tmp_path = self._root / f"{self.FILE_NAME}.{uuid4().hex}.tmp"
        try:
            tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise BusinessError(code="STORE_WRITE_ERROR", message=str(e))


class JsonCredentialStore(CredentialStore):
    """把 API Key 存在 JsonKeyValueStore 的固定键下，跨会话保留。"""

    def __init__(self, kv: Optional[JsonKeyValueStore] = None, key: str = CREDENTIAL_KEY):
        self._kv = kv or JsonKeyValueStore()
        self._key = key

    def get(self) -> Optional[str]:
        return self._kv.get_item(self._key) or None

    def set(self, value: Optional[str]) -> None:
        # 与页面行为一致：清空输入框即写入空串
        self._kv.set_item(self._key, value or "")
