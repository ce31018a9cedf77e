"""领域层模型与协议。

包含：
- models: Message / ModelConfig / ChatRequest / ChatResult。
- conversation: 只追加的内存会话存储 ConversationStore。
- credentials: API Key 持久化协议 CredentialStore。
- exceptions: 业务异常类型定义。
"""
