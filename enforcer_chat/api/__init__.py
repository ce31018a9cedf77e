from enforcer_chat.api.service import ChatSession, get_default_session

__all__ = ["ChatSession", "get_default_session"]
