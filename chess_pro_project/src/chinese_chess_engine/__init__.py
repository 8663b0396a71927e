"""
中国象棋引擎

包括规则引擎（棋盘表示、走法生成、将军与终局检测、走子与悔棋）、
Alpha-Beta 搜索算法和对局会话管理。
"""

__version__ = "0.1.0"
__author__ = "Chess Pro Team"

from .rules_engine import (
    ChessBoard, ChessPiece, GameStatus, Move, PieceColor, PieceType, Position, RuleEngine
)
from .search_algorithm import AlphaBetaSearcher, BoardEvaluator, find_best_move
from .inference_interface import GameMode, GameSession, RecognitionResult
from .config import ConfigManager, SearchConfig, RulesConfig, SessionConfig, SystemConfig
from .utils import setup_logger, get_logger, ChessEngineError

__all__ = [
    "__version__", "__author__",
    "ChessBoard", "ChessPiece", "GameStatus", "Move", "PieceColor", "PieceType",
    "Position", "RuleEngine",
    "AlphaBetaSearcher", "BoardEvaluator", "find_best_move",
    "GameMode", "GameSession", "RecognitionResult",
    "ConfigManager", "SearchConfig", "RulesConfig", "SessionConfig", "SystemConfig",
    "setup_logger", "get_logger", "ChessEngineError"
]
