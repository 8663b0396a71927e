"""
局面评估器

根据子力价值和简单的位置因素给出静态评分，搜索算法只调用这里的接口。
评估完全确定，相同局面总是得到相同分数。
"""

from typing import Dict, Optional

from ..config.engine_config import SearchConfig
from ..rules_engine import ChessBoard, ChessPiece, PieceColor, PieceType


# 子力价值
PIECE_VALUES: Dict[PieceType, int] = {
    PieceType.GENERAL: 10000,
    PieceType.CHARIOT: 900,
    PieceType.CANNON: 450,
    PieceType.HORSE: 400,
    PieceType.ADVISOR: 200,
    PieceType.ELEPHANT: 200,
    PieceType.SOLDIER: 100,
}


def positional_bonus(piece: ChessPiece) -> int:
    """
    计算棋子的位置加分

    Args:
        piece: 棋子

    Returns:
        int: 位置加分
    """
    x, y = piece.position.x, piece.position.y
    is_red = piece.color is PieceColor.RED
    piece_type = piece.type
    bonus = 0

    if piece_type is PieceType.SOLDIER:
        # 越靠近对方底线越好，过河后价值明显提高
        advance = 6 - y if is_red else y - 3
        bonus += max(advance, 0) * 2
        if piece.position.is_across_river(piece.color):
            bonus += 25
            if 3 <= x <= 5:
                bonus += 6

    elif piece_type is PieceType.HORSE:
        if 2 <= x <= 6:
            bonus += 6
        if 3 <= y <= 6:
            bonus += 4

    elif piece_type is PieceType.CHARIOT:
        bonus += max(0, 8 - 2 * abs(4 - x))

    elif piece_type is PieceType.CANNON:
        if 2 <= x <= 6 and 2 <= y <= 7:
            bonus += 8

    elif piece_type is PieceType.GENERAL:
        if x == 4:
            bonus += 10

    elif piece_type is PieceType.ADVISOR:
        home_row = 9 if is_red else 0
        if x == 4 or y == home_row:
            bonus += 4

    elif piece_type is PieceType.ELEPHANT:
        if 2 <= x <= 6:
            bonus += 4

    return bonus


class BoardEvaluator:
    """
    局面评估器

    评分 = 己方(子力 + 位置) - 对方(子力 + 位置) [+ 机动性权重 * 走法数差]
    """

    def __init__(self, config: Optional[SearchConfig] = None):
        """
        初始化评估器

        Args:
            config: 搜索配置，决定是否使用位置加分和机动性
        """
        self.config = config or SearchConfig()
        self.piece_values = dict(PIECE_VALUES)

    def piece_score(self, piece: ChessPiece) -> int:
        """单个棋子的分值"""
        score = self.piece_values[piece.type]
        if self.config.use_positional_bonus:
            score += positional_bonus(piece)
        return score

    def material_balance(self, board: ChessBoard, color: PieceColor) -> int:
        """
        计算子力差

        Args:
            board: 棋盘
            color: 评估视角

        Returns:
            int: 己方子力总值减去对方子力总值
        """
        balance = 0
        for piece in board.iter_pieces():
            value = self.piece_values[piece.type]
            balance += value if piece.color is color else -value
        return balance

    def evaluate(self, board: ChessBoard, color: PieceColor) -> int:
        """
        评估局面

        Args:
            board: 棋盘
            color: 评估视角，分数越高对该方越有利

        Returns:
            int: 局面评分
        """
        score = 0
        for piece in board.iter_pieces():
            value = self.piece_score(piece)
            score += value if piece.color is color else -value

        if self.config.mobility_weight:
            rule_engine = board.rule_engine
            own = len(rule_engine.generate_pseudo_moves(board, color))
            other = len(rule_engine.generate_pseudo_moves(board, color.opponent))
            score += self.config.mobility_weight * (own - other)

        return score
