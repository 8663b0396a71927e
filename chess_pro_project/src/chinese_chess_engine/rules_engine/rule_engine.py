"""
象棋规则引擎

实现各棋子的走法生成、合法性验证和终局状态检测。
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .constants import GameStatus, PieceColor, PieceType
from .move import Move
from .piece import ChessPiece
from .position import Position

if TYPE_CHECKING:
    from .chess_board import ChessBoard


class RuleEngine:
    """
    象棋规则引擎

    负责生成合法走法、验证走法合法性、检测终局状态等。
    规则引擎本身不保存棋局状态，可被多个棋盘共用。
    """

    # 车/炮/帅的直线方向
    ORTHOGONAL_DIRECTIONS = [(0, -1), (0, 1), (-1, 0), (1, 0)]
    # 仕/士的斜向
    ADVISOR_MOVES = [(-1, -1), (1, -1), (-1, 1), (1, 1)]
    # 相/象：(落点偏移, 象眼偏移)
    ELEPHANT_MOVES = [((-2, -2), (-1, -1)), ((2, -2), (1, -1)),
                      ((-2, 2), (-1, 1)), ((2, 2), (1, 1))]
    # 马：(落点偏移, 马腿偏移)，马腿在较长方向上的第一步
    HORSE_MOVES = [
        ((-1, -2), (0, -1)), ((1, -2), (0, -1)),
        ((-2, -1), (-1, 0)), ((2, -1), (1, 0)),
        ((-2, 1), (-1, 0)), ((2, 1), (1, 0)),
        ((-1, 2), (0, 1)), ((1, 2), (0, 1)),
    ]

    def __init__(self, stalemate_is_loss: bool = False):
        """
        初始化规则引擎

        Args:
            stalemate_is_loss: 困毙是否判负；默认为和棋
        """
        self.stalemate_is_loss = stalemate_is_loss

        self._generators = {
            PieceType.GENERAL: self._generate_general_moves,
            PieceType.ADVISOR: self._generate_advisor_moves,
            PieceType.ELEPHANT: self._generate_elephant_moves,
            PieceType.HORSE: self._generate_horse_moves,
            PieceType.CHARIOT: self._generate_chariot_moves,
            PieceType.CANNON: self._generate_cannon_moves,
            PieceType.SOLDIER: self._generate_soldier_moves,
        }

    # ==================== 走法生成 ====================

    def generate_legal_moves(self, board: 'ChessBoard',
                             player: Optional[PieceColor] = None) -> List[Move]:
        """
        生成指定玩家的所有合法走法

        Args:
            board: 当前棋盘状态
            player: 玩家，None表示当前玩家

        Returns:
            List[Move]: 合法走法列表
        """
        if player is None:
            player = board.current_player

        scratch = board.copy()
        return [move for move in self.generate_pseudo_moves(board, player)
                if not self._is_self_exposing(scratch, move)]

    def generate_pseudo_moves(self, board: 'ChessBoard', player: PieceColor) -> List[Move]:
        """
        生成指定玩家的所有走法（不检查走后是否被将军）

        Args:
            board: 当前棋盘状态
            player: 玩家

        Returns:
            List[Move]: 走法列表
        """
        moves = []
        for piece in board.get_all_pieces(player):
            moves.extend(self.generate_piece_moves(board, piece.position))
        return moves

    def generate_piece_moves(self, board: 'ChessBoard', pos: Position) -> List[Move]:
        """
        生成指定位置棋子的所有可能走法

        Args:
            board: 当前棋盘状态
            pos: 棋子位置

        Returns:
            List[Move]: 可能的走法列表
        """
        piece = board.piece_at(pos)
        if piece is None:
            return []
        return self._generators[piece.type](board, piece)

    def has_legal_move(self, board: 'ChessBoard', player: Optional[PieceColor] = None) -> bool:
        """检查指定玩家是否至少有一个合法走法"""
        if player is None:
            player = board.current_player

        scratch = board.copy()
        for move in self.generate_pseudo_moves(board, player):
            if not self._is_self_exposing(scratch, move):
                return True
        return False

    def _make_move(self, board: 'ChessBoard', piece: ChessPiece,
                   target: Position) -> Optional[Move]:
        """目标位置为空或敌方棋子时生成走法，否则返回None"""
        occupant = board.piece_at(target)
        if occupant is not None and occupant.color is piece.color:
            return None
        return Move(from_pos=piece.position, to_pos=target,
                    piece=piece, captured_piece=occupant)

    def _generate_step_moves(self, board: 'ChessBoard', piece: ChessPiece,
                             offsets, in_palace: bool) -> List[Move]:
        """生成单步走法（帅/将、仕/士）"""
        moves = []
        for dx, dy in offsets:
            target = piece.position.offset(dx, dy)
            if target is None:
                continue
            if in_palace and not target.is_in_palace(piece.color):
                continue
            move = self._make_move(board, piece, target)
            if move is not None:
                moves.append(move)
        return moves

    def _generate_general_moves(self, board: 'ChessBoard', piece: ChessPiece) -> List[Move]:
        """生成帅/将的走法"""
        return self._generate_step_moves(board, piece, self.ORTHOGONAL_DIRECTIONS, in_palace=True)

    def _generate_advisor_moves(self, board: 'ChessBoard', piece: ChessPiece) -> List[Move]:
        """生成仕/士的走法"""
        return self._generate_step_moves(board, piece, self.ADVISOR_MOVES, in_palace=True)

    def _generate_elephant_moves(self, board: 'ChessBoard', piece: ChessPiece) -> List[Move]:
        """生成相/象的走法"""
        moves = []
        for (dx, dy), (eye_dx, eye_dy) in self.ELEPHANT_MOVES:
            target = piece.position.offset(dx, dy)
            # 不能过河
            if target is None or target.is_across_river(piece.color):
                continue
            # 塞象眼
            if not board.is_empty(piece.position.offset(eye_dx, eye_dy)):
                continue
            move = self._make_move(board, piece, target)
            if move is not None:
                moves.append(move)
        return moves

    def _generate_horse_moves(self, board: 'ChessBoard', piece: ChessPiece) -> List[Move]:
        """生成马的走法"""
        moves = []
        for (dx, dy), (leg_dx, leg_dy) in self.HORSE_MOVES:
            target = piece.position.offset(dx, dy)
            if target is None:
                continue
            # 蹩马腿
            if not board.is_empty(piece.position.offset(leg_dx, leg_dy)):
                continue
            move = self._make_move(board, piece, target)
            if move is not None:
                moves.append(move)
        return moves

    def _generate_chariot_moves(self, board: 'ChessBoard', piece: ChessPiece) -> List[Move]:
        """生成车的走法"""
        moves = []
        for dx, dy in self.ORTHOGONAL_DIRECTIONS:
            target = piece.position.offset(dx, dy)
            while target is not None:
                occupant = board.piece_at(target)
                if occupant is None:
                    moves.append(Move(piece.position, target, piece))
                else:
                    if occupant.color is not piece.color:
                        moves.append(Move(piece.position, target, piece, occupant))
                    break  # 无论如何都不能继续前进
                target = target.offset(dx, dy)
        return moves

    def _generate_cannon_moves(self, board: 'ChessBoard', piece: ChessPiece) -> List[Move]:
        """生成炮的走法"""
        moves = []
        for dx, dy in self.ORTHOGONAL_DIRECTIONS:
            found_screen = False
            target = piece.position.offset(dx, dy)
            while target is not None:
                occupant = board.piece_at(target)
                if not found_screen:
                    if occupant is None:
                        moves.append(Move(piece.position, target, piece))
                    else:
                        found_screen = True  # 找到炮架
                elif occupant is not None:
                    if occupant.color is not piece.color:
                        moves.append(Move(piece.position, target, piece, occupant))
                    break
                target = target.offset(dx, dy)
        return moves

    def _generate_soldier_moves(self, board: 'ChessBoard', piece: ChessPiece) -> List[Move]:
        """生成兵/卒的走法"""
        forward = -1 if piece.color is PieceColor.RED else 1
        offsets = [(0, forward)]
        # 过河后可以左右移动
        if piece.position.is_across_river(piece.color):
            offsets += [(-1, 0), (1, 0)]
        return self._generate_step_moves(board, piece, offsets, in_palace=False)

    # ==================== 合法性验证 ====================

    def is_legal_move(self, board: 'ChessBoard', move: Move) -> bool:
        """
        验证走法是否合法

        Args:
            board: 当前棋盘状态
            move: 要验证的走法

        Returns:
            bool: 是否合法
        """
        if move.piece.color is not board.current_player:
            return False
        if board.piece_at(move.from_pos) != move.piece:
            return False

        for candidate in self.generate_piece_moves(board, move.from_pos):
            if candidate == move:
                return not self._is_self_exposing(board.copy(), candidate)
        return False

    def _is_self_exposing(self, scratch: 'ChessBoard', move: Move) -> bool:
        """
        在副本上模拟走法，检查走后己方是否被将军或帅将照面

        副本在返回前恢复原状。
        """
        captured = scratch._displace(move)
        try:
            return self.is_in_check(scratch, move.color) or self.generals_facing(scratch)
        finally:
            scratch._restore(move, captured)

    def is_in_check(self, board: 'ChessBoard', player: PieceColor) -> bool:
        """
        检查指定玩家是否被将军

        Args:
            board: 棋盘状态
            player: 玩家

        Returns:
            bool: 是否被将军
        """
        general_pos = board.find_general(player)
        if general_pos is None:
            return False  # 没有帅/将，不可能被将军
        return self.is_square_attacked(board, general_pos, player.opponent)

    def is_square_attacked(self, board: 'ChessBoard', target: Position,
                           by_player: PieceColor) -> bool:
        """检查指定方是否有棋子可以走到目标位置"""
        for piece in board.iter_pieces(by_player):
            if self.can_attack(board, piece, target):
                return True
        return False

    def can_attack(self, board: 'ChessBoard', piece: ChessPiece, target: Position) -> bool:
        """
        检查棋子的可达位置（不考虑走后是否被将军）是否包含目标位置

        与 generate_piece_moves 的结果一致，但不必生成全部走法。

        Args:
            board: 棋盘状态
            piece: 攻击方棋子
            target: 目标位置

        Returns:
            bool: 是否能走到目标位置
        """
        occupant = board.piece_at(target)
        if occupant is not None and occupant.color is piece.color:
            return False

        origin = piece.position
        dx, dy = target.x - origin.x, target.y - origin.y
        if dx == 0 and dy == 0:
            return False

        piece_type = piece.type
        if piece_type is PieceType.CHARIOT:
            return (dx == 0 or dy == 0) and self._count_between(board, origin, target) == 0

        if piece_type is PieceType.CANNON:
            if dx != 0 and dy != 0:
                return False
            screens = self._count_between(board, origin, target)
            return screens == 1 if occupant is not None else screens == 0

        if piece_type is PieceType.HORSE:
            for (move_dx, move_dy), (leg_dx, leg_dy) in self.HORSE_MOVES:
                if (move_dx, move_dy) == (dx, dy):
                    return board.is_empty(origin.offset(leg_dx, leg_dy))
            return False

        if piece_type is PieceType.ELEPHANT:
            if abs(dx) != 2 or abs(dy) != 2 or target.is_across_river(piece.color):
                return False
            return board.is_empty(origin.offset(dx // 2, dy // 2))

        if piece_type is PieceType.ADVISOR:
            return abs(dx) == 1 and abs(dy) == 1 and target.is_in_palace(piece.color)

        if piece_type is PieceType.GENERAL:
            return abs(dx) + abs(dy) == 1 and target.is_in_palace(piece.color)

        # 兵/卒
        forward = -1 if piece.color is PieceColor.RED else 1
        if dx == 0 and dy == forward:
            return True
        return dy == 0 and abs(dx) == 1 and origin.is_across_river(piece.color)

    def _count_between(self, board: 'ChessBoard', start: Position, end: Position) -> int:
        """统计同一直线上两点之间（不含端点）的棋子数"""
        step_x = (end.x > start.x) - (end.x < start.x)
        step_y = (end.y > start.y) - (end.y < start.y)
        count = 0
        current = start.offset(step_x, step_y)
        while current is not None and current != end:
            if not board.is_empty(current):
                count += 1
            current = current.offset(step_x, step_y)
        return count

    def generals_facing(self, board: 'ChessBoard') -> bool:
        """
        检查帅将是否照面（同一纵线且中间无子）

        Args:
            board: 棋盘状态

        Returns:
            bool: 是否照面
        """
        red_pos = board.find_general(PieceColor.RED)
        black_pos = board.find_general(PieceColor.BLACK)
        if red_pos is None or black_pos is None or red_pos.x != black_pos.x:
            return False
        return self._count_between(board, red_pos, black_pos) == 0

    # ==================== 终局检测 ====================

    def is_checkmate(self, board: 'ChessBoard', player: PieceColor) -> bool:
        """
        检查指定玩家是否被将死

        Args:
            board: 棋盘状态
            player: 玩家

        Returns:
            bool: 是否被将死
        """
        return self.is_in_check(board, player) and not self.has_legal_move(board, player)

    def is_stalemate(self, board: 'ChessBoard', player: PieceColor) -> bool:
        """
        检查指定玩家是否被困毙

        Args:
            board: 棋盘状态
            player: 玩家

        Returns:
            bool: 是否被困毙
        """
        # 困毙：没有被将军，但没有合法走法
        return not self.is_in_check(board, player) and not self.has_legal_move(board, player)

    def compute_status(self, board: 'ChessBoard') -> GameStatus:
        """
        计算当前局面的对局状态

        Args:
            board: 棋盘状态

        Returns:
            GameStatus: 对局状态
        """
        red_general = board.find_general(PieceColor.RED)
        black_general = board.find_general(PieceColor.BLACK)

        # 导入的局面可能缺少帅/将
        if red_general is None and black_general is None:
            return GameStatus.DRAW
        if red_general is None:
            return GameStatus.BLACK_WINS
        if black_general is None:
            return GameStatus.RED_WINS

        player = board.current_player
        if self.has_legal_move(board, player):
            return GameStatus.PLAYING

        if self.is_in_check(board, player) or self.stalemate_is_loss:
            return GameStatus.win_for(player.opponent)
        return GameStatus.DRAW

    def get_game_status(self, board: 'ChessBoard') -> Dict[str, Any]:
        """
        获取游戏状态

        Args:
            board: 棋盘状态

        Returns:
            Dict: 游戏状态信息
        """
        current_player = board.current_player
        in_check = self.is_in_check(board, current_player)
        legal_moves = self.generate_legal_moves(board, current_player)
        status = self.compute_status(board)

        return {
            'current_player': current_player,
            'current_player_name': current_player.display_name,
            'in_check': in_check,
            'checkmate': in_check and not legal_moves,
            'stalemate': not in_check and not legal_moves,
            'status': status,
            'game_over': status.is_terminal,
            'legal_moves_count': len(legal_moves),
            'legal_moves': legal_moves[:10],  # 只返回前10个走法
        }
