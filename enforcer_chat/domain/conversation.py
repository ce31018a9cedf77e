from typing import Iterator, List, Tuple

from .exceptions import ValidationError
from .models import Message


class ConversationStore:
    """页面会话期间的对话历史，只追加。

    没有删除、编辑或压缩；每次请求都会完整回放 snapshot()。
    只有 RequestPipeline 会写入，并发由流水线的锁保证。
    """

    def __init__(self) -> None:
        self._messages: List[Message] = []

    def append(self, message: Message) -> None:
        if message.role == "user" and not message.content.strip():
            raise ValidationError(code="EMPTY_MESSAGE", message="User message must not be empty")
        self._messages.append(message)

    def snapshot(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.snapshot())
