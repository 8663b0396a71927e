"""
象棋规则引擎模块

包含棋局表示、走法生成、规则验证等核心功能。
"""

from .constants import PieceType, PieceColor, GameStatus
from .position import Position
from .piece import ChessPiece, standard_layout
from .move import Move
from .rule_engine import RuleEngine
from .chess_board import ChessBoard, MoveRecord
from .board_validator import BoardValidator

__all__ = [
    'PieceType', 'PieceColor', 'GameStatus',
    'Position', 'ChessPiece', 'standard_layout', 'Move',
    'RuleEngine', 'ChessBoard', 'MoveRecord', 'BoardValidator'
]
