"""
配置管理模块

包含搜索配置、规则配置、会话配置和系统配置。
"""

from .config_manager import ConfigManager
from .engine_config import SearchConfig, RulesConfig, SessionConfig, SystemConfig

__all__ = ['ConfigManager', 'SearchConfig', 'RulesConfig', 'SessionConfig', 'SystemConfig']
