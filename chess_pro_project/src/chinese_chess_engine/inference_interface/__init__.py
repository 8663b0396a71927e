"""
对局接口模块

提供面向界面和识别模块的对局会话管理。
"""

from .game_session import GameMode, GameSession, RecognitionResult, SessionState

__all__ = ['GameMode', 'GameSession', 'RecognitionResult', 'SessionState']
