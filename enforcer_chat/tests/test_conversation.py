import dataclasses

import pytest

from enforcer_chat.domain.conversation import ConversationStore
from enforcer_chat.domain.exceptions import ValidationError
from enforcer_chat.domain.models import MODEL_CHOICES, Message, ModelConfig


def test_store_appends_in_order():
    store = ConversationStore()
    store.append(Message(role="user", content="hi"))
    store.append(Message(role="assistant", content="what"))
    assert [m.content for m in store] == ["hi", "what"]
    assert len(store) == 2


def test_snapshot_is_read_only_copy():
    store = ConversationStore()
    store.append(Message(role="user", content="hi"))
    snap = store.snapshot()
    store.append(Message(role="assistant", content="later"))
    assert len(snap) == 1
    assert isinstance(snap, tuple)


def test_store_rejects_blank_user_message():
    store = ConversationStore()
    with pytest.raises(ValidationError):
        store.append(Message(role="user", content="  "))
    assert len(store) == 0


def test_message_is_immutable():
    msg = Message(role="user", content="hi")
    with pytest.raises(dataclasses.FrozenInstanceError):
        msg.content = "changed"


def test_model_config_defaults():
    cfg = ModelConfig()
    assert cfg.model == "gemini-2.5-flash"
    assert cfg.max_tokens == 150
    assert cfg.temperature == 0.7
    assert cfg.model == MODEL_CHOICES[0]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"model": "gpt-4"},
        {"max_tokens": 49},
        {"max_tokens": 501},
        {"max_tokens": 100.5},
        {"temperature": -0.1},
        {"temperature": 1.2},
        {"temperature": 1.04},
        {"temperature": -0.04},
        {"temperature": "hot"},
    ],
)
def test_model_config_bounds(kwargs):
    with pytest.raises(ValidationError) as exc:
        ModelConfig(**kwargs)
    assert exc.value.code == "INVALID_CONFIG"


def test_model_config_edges_and_rounding():
    assert ModelConfig(max_tokens=50).max_tokens == 50
    assert ModelConfig(max_tokens=500).max_tokens == 500
    assert ModelConfig(temperature=0).temperature == 0.0
    assert ModelConfig(temperature=0.34).temperature == 0.3
    assert ModelConfig(temperature=0.7).temperature == 0.7
    assert ModelConfig(temperature=0.96).temperature == 1.0
    assert ModelConfig(temperature=0.04).temperature == 0.0


def test_with_changes_returns_new_config():
    cfg = ModelConfig()
    changed = cfg.with_changes(model="gemini-1.5-flash", temperature=1)
    assert cfg.model == "gemini-2.5-flash"
    assert changed.model == "gemini-1.5-flash"
    assert changed.temperature == 1.0
    with pytest.raises(ValidationError):
        cfg.with_changes(max_tokens=1000)
