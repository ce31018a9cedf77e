"""配置层：Settings 与全局 settings 实例。"""

from enforcer_chat.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
