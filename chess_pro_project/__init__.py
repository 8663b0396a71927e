"""
中国象棋专业版 (Chess Pro)

中国象棋规则引擎与对弈AI，为界面和棋盘识别模块提供棋局管理、走法验证和走法建议。
"""

__version__ = "0.1.0"
__author__ = "Chess Pro Team"
__description__ = "中国象棋引擎 - 规则验证、Alpha-Beta 搜索与对局会话管理"

from chess_pro_project.src import chinese_chess_engine

__all__ = [
    "chinese_chess_engine",
    "__version__",
    "__author__",
    "__description__",
]
