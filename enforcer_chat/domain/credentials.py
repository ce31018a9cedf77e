from typing import Optional, Protocol


# 与浏览器 localStorage 中使用的键保持一致
CREDENTIAL_KEY = "gemini_api_key"


class CredentialStore(Protocol):
    """API Key 的持久化抽象。

    流水线本身不关心 Key 存在哪里，只接收调用方传入的字符串。
    """

    def get(self) -> Optional[str]:
        ...

    def set(self, value: Optional[str]) -> None:
        ...
