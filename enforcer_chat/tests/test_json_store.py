import json
import tempfile
from pathlib import Path

import pytest

from enforcer_chat.domain.credentials import CREDENTIAL_KEY
from enforcer_chat.domain.exceptions import BusinessError
from enforcer_chat.infrastructure.storage.json_store import JsonCredentialStore, JsonKeyValueStore


def test_credential_persists_across_instances():
    with tempfile.TemporaryDirectory() as d:
        root = Path(d) / ".storage"
        store = JsonCredentialStore(JsonKeyValueStore(root=root))
        assert store.get() is None
        store.set("AIza-secret")

        reopened = JsonCredentialStore(JsonKeyValueStore(root=root))
        assert reopened.get() == "AIza-secret"
        data = json.loads((root / JsonKeyValueStore.FILE_NAME).read_text(encoding="utf-8"))
        assert data == {CREDENTIAL_KEY: "AIza-secret"}


def test_clearing_credential_reads_back_as_none():
    with tempfile.TemporaryDirectory() as d:
        store = JsonCredentialStore(JsonKeyValueStore(root=d))
        store.set("k")
        store.set("")
        assert store.get() is None


def test_key_value_store_keeps_other_keys():
    with tempfile.TemporaryDirectory() as d:
        kv = JsonKeyValueStore(root=d)
        kv.set_item("theme", "dark")
        JsonCredentialStore(kv).set("k")
        assert kv.get_item("theme") == "dark"
        assert kv.get_item(CREDENTIAL_KEY) == "k"
        assert not list(Path(d).glob("*.tmp"))


def test_corrupted_file_raises_read_error():
    with tempfile.TemporaryDirectory() as d:
        kv = JsonKeyValueStore(root=d)
        kv.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(BusinessError) as exc:
            JsonCredentialStore(kv).get()
        assert exc.value.code == "STORE_READ_ERROR"


def test_failed_write_leaves_no_temp_file(monkeypatch):
    def failing_replace(src, dst):
        raise OSError("disk full")

    with tempfile.TemporaryDirectory() as d:
        kv = JsonKeyValueStore(root=d)
        monkeypatch.setattr("enforcer_chat.infrastructure.storage.json_store.os.replace", failing_replace)
        with pytest.raises(BusinessError) as exc:
            JsonCredentialStore(kv).set("k")
        assert exc.value.code == "STORE_WRITE_ERROR"
        assert not list(Path(d).glob("*.tmp"))
        assert not kv.path.exists()
