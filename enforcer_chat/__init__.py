"""Enforcer Chat 顶层包。

一个把用户输入转发给 Gemini generateContent 接口并显示回复的聊天客户端，
包括配置加载、领域模型、Provider 适配、请求流水线、会话控制器与终端界面。
"""

from enforcer_chat.api.service import ChatSession, get_default_session

__all__ = ["ChatSession", "get_default_session"]
