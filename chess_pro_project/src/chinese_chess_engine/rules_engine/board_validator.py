"""
棋局合法性验证器

检查导入局面的结构问题。验证结果只用于提示，棋盘仍会按原样接受导入的局面。
"""

from typing import Any, Dict, List, Tuple

from .chess_board import ChessBoard
from .constants import PieceColor, PieceType
from .piece import PIECE_NAMES


# 相/象可以到达的全部位置（己方半场）
RED_ELEPHANT_SQUARES = {(2, 9), (6, 9), (0, 7), (4, 7), (8, 7), (2, 5), (6, 5)}
BLACK_ELEPHANT_SQUARES = {(x, 9 - y) for x, y in RED_ELEPHANT_SQUARES}


class BoardValidator:
    """
    棋局合法性验证器

    提供各种棋局状态的验证功能。
    """

    def __init__(self):
        """初始化验证器"""
        # 每方棋子数量限制
        self.piece_limits = {
            PieceType.GENERAL: 1,
            PieceType.ADVISOR: 2,
            PieceType.ELEPHANT: 2,
            PieceType.HORSE: 2,
            PieceType.CHARIOT: 2,
            PieceType.CANNON: 2,
            PieceType.SOLDIER: 5,
        }

    def validate_piece_counts(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """
        验证棋子数量

        Args:
            board: 要验证的棋盘

        Returns:
            Tuple[bool, List[str]]: (是否合法, 错误信息列表)
        """
        errors = []

        for color in (PieceColor.RED, PieceColor.BLACK):
            counts = board.count_pieces(color)
            for piece_type, limit in self.piece_limits.items():
                count = counts.get(piece_type, 0)
                name = PIECE_NAMES[piece_type][0 if color is PieceColor.RED else 1]
                if count > limit:
                    errors.append(f"{color.display_name}{name}数量超限: {count} > {limit}")
                elif piece_type is PieceType.GENERAL and count != 1:
                    errors.append(f"{color.display_name}{name}数量错误: {count}, 应为1")

        return len(errors) == 0, errors

    def validate_piece_positions(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """
        验证棋子位置的合法性

        Args:
            board: 要验证的棋盘

        Returns:
            Tuple[bool, List[str]]: (是否合法, 错误信息列表)
        """
        errors = []

        for piece in board.get_all_pieces():
            pos = piece.position
            label = f"{piece.color.display_name}{piece.name}"

            if piece.type in (PieceType.GENERAL, PieceType.ADVISOR):
                if not pos.is_in_palace(piece.color):
                    errors.append(f"{label}位置错误: {pos}, 应在九宫内")
            elif piece.type is PieceType.ELEPHANT:
                squares = RED_ELEPHANT_SQUARES if piece.color is PieceColor.RED else BLACK_ELEPHANT_SQUARES
                if (pos.x, pos.y) not in squares:
                    errors.append(f"{label}位置错误: {pos}")
            elif piece.type is PieceType.SOLDIER:
                # 兵/卒不会后退，未过河时只能停在原始纵线上
                home_row = 6 if piece.color is PieceColor.RED else 3
                behind = pos.y > home_row if piece.color is PieceColor.RED else pos.y < home_row
                if behind:
                    errors.append(f"{label}位置错误: {pos}, 不能位于己方兵线之后")
                elif not pos.is_across_river(piece.color) and pos.x % 2 == 1:
                    errors.append(f"{label}位置错误: {pos}, 未过河时不能离开原纵线")

        return len(errors) == 0, errors

    def validate_generals_facing(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """
        验证帅将是否照面

        Args:
            board: 要验证的棋盘

        Returns:
            Tuple[bool, List[str]]: (是否合法, 错误信息列表)
        """
        errors = []
        if board.rule_engine.generals_facing(board):
            errors.append("帅将照面，中间无棋子阻挡")
        return len(errors) == 0, errors

    def validate_waiting_side_not_in_check(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """
        验证等待走子的一方没有被将军

        Args:
            board: 要验证的棋盘

        Returns:
            Tuple[bool, List[str]]: (是否合法, 错误信息列表)
        """
        errors = []
        waiting = board.current_player.opponent
        if board.rule_engine.is_in_check(board, waiting):
            errors.append(f"{waiting.display_name}被将军，但轮到{board.current_player.display_name}走子")
        return len(errors) == 0, errors

    def full_validation(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """
        完整的棋局验证

        Args:
            board: 要验证的棋盘

        Returns:
            Tuple[bool, List[str]]: (是否合法, 所有错误信息列表)
        """
        all_errors = []
        for validation_func in self._validations().values():
            _, errors = validation_func(board)
            all_errors.extend(errors)
        return len(all_errors) == 0, all_errors

    def get_validation_report(self, board: ChessBoard) -> Dict[str, Any]:
        """
        获取详细的验证报告

        Args:
            board: 要验证的棋盘

        Returns:
            Dict[str, Any]: 验证报告
        """
        report = {
            'overall_valid': True,
            'total_errors': 0,
            'validations': {}
        }

        for test_name, test_func in self._validations().items():
            is_valid, errors = test_func(board)
            report['validations'][test_name] = {
                'valid': is_valid,
                'errors': errors,
                'error_count': len(errors)
            }
            if not is_valid:
                report['overall_valid'] = False
                report['total_errors'] += len(errors)

        return report

    def _validations(self):
        return {
            'piece_counts': self.validate_piece_counts,
            'piece_positions': self.validate_piece_positions,
            'generals_facing': self.validate_generals_facing,
            'check_state': self.validate_waiting_side_not_in_check,
        }
