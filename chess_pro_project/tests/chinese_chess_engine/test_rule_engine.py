"""
测试RuleEngine类的功能

测试走法生成、合法性验证、终局检测等功能。
"""

import pytest

from chess_pro_project.src.chinese_chess_engine.rules_engine import (
    ChessBoard, ChessPiece, GameStatus, Move, PieceColor, PieceType, Position, RuleEngine
)


RED = PieceColor.RED
BLACK = PieceColor.BLACK


def make_board(layout, current_player=RED, rule_engine=None):
    """根据 (类型, 颜色, x, y) 列表创建棋盘"""
    board = ChessBoard(pieces=[], rule_engine=rule_engine)
    board.set_position(
        [ChessPiece(piece_type, color, Position(x, y)) for piece_type, color, x, y in layout],
        current_player=current_player
    )
    return board


def targets(moves):
    return {move.to_pos for move in moves}


# 红方将死黑方的一步杀局面：车九进五后黑将无处可走
MATE_IN_ONE = [
    (PieceType.GENERAL, RED, 3, 9),
    (PieceType.GENERAL, BLACK, 4, 0),
    (PieceType.CHARIOT, RED, 0, 1),
    (PieceType.CHARIOT, RED, 8, 5),
]

# 黑方被困毙：没有被将军，但将无处可走
BLACK_STALEMATED = [
    (PieceType.GENERAL, RED, 4, 9),
    (PieceType.GENERAL, BLACK, 3, 0),
    (PieceType.CHARIOT, RED, 8, 1),
]


class TestRuleEngine:
    """RuleEngine类的测试"""

    def setup_method(self):
        """每个测试方法前的设置"""
        self.rule_engine = RuleEngine()
        self.board = ChessBoard(rule_engine=self.rule_engine)

    def test_initial_legal_moves(self):
        """测试初始局面的合法走法"""
        moves = self.rule_engine.generate_legal_moves(self.board)
        assert len(moves) == 44
        assert len(set(moves)) == 44

        notations = {move.to_chinese_notation() for move in moves}
        assert "炮二平五" in notations
        assert "马八进七" in notations
        assert "兵三进一" in notations
        assert "炮二进七" in notations   # 隔子打马

        black_moves = self.rule_engine.generate_legal_moves(self.board, BLACK)
        assert len(black_moves) == 44

    def test_legal_moves_deterministic(self):
        """测试走法生成顺序确定"""
        assert self.board.legal_moves() == ChessBoard().legal_moves()

    def test_chariot_moves(self):
        """测试车的走法：遇子停止，可吃敌子"""
        board = make_board([
            (PieceType.GENERAL, RED, 3, 9),
            (PieceType.GENERAL, BLACK, 5, 0),
            (PieceType.CHARIOT, RED, 0, 5),
            (PieceType.SOLDIER, RED, 0, 3),
            (PieceType.HORSE, BLACK, 3, 5),
        ])
        moves = self.rule_engine.generate_piece_moves(board, Position(0, 5))
        expected = {Position(0, 4), Position(0, 6), Position(0, 7), Position(0, 8), Position(0, 9),
                    Position(1, 5), Position(2, 5), Position(3, 5)}
        assert targets(moves) == expected
        capture = [m for m in moves if m.to_pos == Position(3, 5)][0]
        assert capture.captured_piece.type is PieceType.HORSE

    def test_horse_leg(self):
        """测试马腿：较长方向上的相邻位置被占时不能走"""
        layout = [
            (PieceType.GENERAL, RED, 3, 9),
            (PieceType.GENERAL, BLACK, 5, 0),
            (PieceType.HORSE, RED, 4, 5),
        ]
        board = make_board(layout)
        assert len(self.rule_engine.generate_piece_moves(board, Position(4, 5))) == 8

        blocked = make_board(layout + [(PieceType.SOLDIER, RED, 4, 4)])
        moves = targets(self.rule_engine.generate_piece_moves(blocked, Position(4, 5)))
        assert len(moves) == 6
        assert Position(3, 3) not in moves
        assert Position(5, 3) not in moves
        # 斜线上的子不影响马
        assert Position(2, 4) in moves

    def test_elephant_eye_and_river(self):
        """测试塞象眼和相不过河"""
        board = make_board([
            (PieceType.GENERAL, RED, 3, 9),
            (PieceType.GENERAL, BLACK, 5, 0),
            (PieceType.ELEPHANT, RED, 2, 5),
            (PieceType.SOLDIER, RED, 1, 6),
        ])
        moves = targets(self.rule_engine.generate_piece_moves(board, Position(2, 5)))
        assert moves == {Position(4, 7)}

    def test_elephant_never_crosses_river(self):
        """测试任何合法走法都不会让相/象过河"""
        board = ChessBoard()
        for _ in range(6):
            for move in board.legal_moves():
                if move.piece.type is PieceType.ELEPHANT:
                    assert not move.to_pos.is_across_river(move.color)
            board.make_move(board.legal_moves()[-1])

    def test_advisor_and_general_stay_in_palace(self):
        """测试仕和帅不出九宫"""
        board = make_board([
            (PieceType.GENERAL, RED, 3, 7),
            (PieceType.GENERAL, BLACK, 5, 0),
            (PieceType.ADVISOR, RED, 4, 8),
        ])
        advisor_moves = targets(self.rule_engine.generate_piece_moves(board, Position(4, 8)))
        assert advisor_moves == {Position(5, 7), Position(3, 9), Position(5, 9)}

        general_moves = targets(self.rule_engine.generate_piece_moves(board, Position(3, 7)))
        assert general_moves == {Position(4, 7), Position(3, 8)}

    def test_soldier_moves(self):
        """测试兵/卒：过河前只能前进，过河后可以横走，不能后退"""
        board = make_board([
            (PieceType.GENERAL, RED, 3, 9),
            (PieceType.GENERAL, BLACK, 5, 0),
            (PieceType.SOLDIER, RED, 4, 6),
            (PieceType.SOLDIER, RED, 2, 4),
            (PieceType.SOLDIER, BLACK, 6, 5),
        ])
        assert targets(self.rule_engine.generate_piece_moves(board, Position(4, 6))) == {Position(4, 5)}
        assert targets(self.rule_engine.generate_piece_moves(board, Position(2, 4))) == {
            Position(2, 3), Position(1, 4), Position(3, 4)
        }
        assert targets(self.rule_engine.generate_piece_moves(board, Position(6, 5))) == {
            Position(6, 6), Position(5, 5), Position(7, 5)
        }

    def test_soldier_on_last_rank_moves_sideways_only(self):
        """测试到达底线的兵只能横走"""
        board = make_board([
            (PieceType.GENERAL, RED, 3, 9),
            (PieceType.GENERAL, BLACK, 5, 0),
            (PieceType.SOLDIER, RED, 0, 0),
        ])
        assert targets(self.rule_engine.generate_piece_moves(board, Position(0, 0))) == {Position(1, 0)}

    @pytest.mark.parametrize("screens, legal", [
        ([], False),
        ([(PieceType.SOLDIER, RED, 0, 5)], True),
        ([(PieceType.SOLDIER, BLACK, 0, 5)], True),
        ([(PieceType.SOLDIER, RED, 0, 5), (PieceType.SOLDIER, BLACK, 0, 4)], False),
    ])
    def test_cannon_capture_needs_exactly_one_screen(self, screens, legal):
        """测试炮吃子时中间必须恰好有一个炮架"""
        board = make_board([
            (PieceType.GENERAL, RED, 3, 9),
            (PieceType.GENERAL, BLACK, 5, 0),
            (PieceType.CANNON, RED, 0, 9),
            (PieceType.CHARIOT, BLACK, 0, 2),
        ] + screens)
        cannon = board.piece_at(Position(0, 9))
        assert board.is_legal_move(Move(Position(0, 9), Position(0, 2), cannon)) is legal

    def test_cannon_quiet_move_needs_clear_path(self):
        """测试炮不吃子时路径必须为空"""
        board = make_board([
            (PieceType.GENERAL, RED, 3, 9),
            (PieceType.GENERAL, BLACK, 5, 0),
            (PieceType.CANNON, RED, 0, 9),
            (PieceType.SOLDIER, RED, 0, 6),
        ])
        moves = targets(self.rule_engine.generate_piece_moves(board, Position(0, 9)))
        assert Position(0, 7) in moves
        assert Position(0, 5) not in moves
        assert Position(0, 6) not in moves

    def test_check_detection(self):
        """测试将军检测"""
        board = make_board([
            (PieceType.GENERAL, RED, 4, 9),
            (PieceType.GENERAL, BLACK, 3, 0),
            (PieceType.CHARIOT, BLACK, 4, 2),
        ])
        assert self.rule_engine.is_in_check(board, RED)
        assert not self.rule_engine.is_in_check(board, BLACK)
        assert board.is_in_check()

    def test_pinned_piece_cannot_expose_general(self):
        """测试被牵制的棋子不能离开，走后不能被将军"""
        board = make_board([
            (PieceType.GENERAL, RED, 4, 9),
            (PieceType.GENERAL, BLACK, 3, 0),
            (PieceType.CHARIOT, RED, 4, 5),
            (PieceType.CHARIOT, BLACK, 4, 1),
        ])
        chariot_moves = [m for m in board.legal_moves() if m.piece.type is PieceType.CHARIOT]
        assert chariot_moves
        assert all(m.to_pos.x == 4 for m in chariot_moves)

    def test_legal_moves_never_leave_general_attacked(self):
        """测试合法走法执行后走子方都不会被将军"""
        board = ChessBoard()
        for _ in range(8):
            mover = board.current_player
            for move in board.legal_moves():
                scratch = board.copy()
                assert scratch.make_move(move)
                assert not self.rule_engine.is_in_check(scratch, mover)
                assert not self.rule_engine.generals_facing(scratch)
            board.make_move(board.legal_moves()[len(board.legal_moves()) // 2])

    def test_facing_generals_excluded(self):
        """测试帅将照面的走法被排除"""
        board = make_board([
            (PieceType.GENERAL, RED, 3, 9),
            (PieceType.GENERAL, BLACK, 4, 0),
            (PieceType.HORSE, RED, 0, 9),
        ])
        general = board.piece_at(Position(3, 9))
        facing_move = Move(Position(3, 9), Position(4, 9), general)
        assert not board.is_legal_move(facing_move)
        assert not board.make_move(facing_move)
        assert Move(Position(3, 9), Position(3, 8), general) in board.legal_moves()

    def test_blocking_piece_cannot_leave_file_between_generals(self):
        """测试帅将之间唯一的棋子不能离开该纵线"""
        board = make_board([
            (PieceType.GENERAL, RED, 4, 9),
            (PieceType.GENERAL, BLACK, 4, 0),
            (PieceType.HORSE, RED, 4, 5),
        ])
        assert self.rule_engine.generals_facing(board) is False
        horse_moves = [m for m in board.legal_moves() if m.piece.type is PieceType.HORSE]
        assert horse_moves == []

    def test_can_attack_matches_piece_moves(self):
        """测试攻击判断与走法生成一致"""
        boards = [ChessBoard(), make_board(MATE_IN_ONE)]
        walker = ChessBoard()
        for _ in range(10):
            walker.make_move(walker.legal_moves()[0])
        boards.append(walker)

        for board in boards:
            for piece in board.get_all_pieces():
                reachable = targets(self.rule_engine.generate_piece_moves(board, piece.position))
                for x in range(9):
                    for y in range(10):
                        target = Position(x, y)
                        assert self.rule_engine.can_attack(board, piece, target) == (target in reachable), \
                            f"{piece} -> {target}"

    def test_checkmate(self):
        """测试将死判定"""
        board = make_board(MATE_IN_ONE, rule_engine=self.rule_engine)
        chariot = board.piece_at(Position(8, 5))
        assert board.make_move(Move(Position(8, 5), Position(8, 0), chariot))

        assert board.status is GameStatus.RED_WINS
        assert self.rule_engine.is_checkmate(board, BLACK)
        assert board.legal_moves() == []

        status = self.rule_engine.get_game_status(board)
        assert status['checkmate'] is True
        assert status['game_over'] is True
        assert status['legal_moves_count'] == 0

    def test_undo_after_checkmate_restores_playing(self):
        """测试将死后悔棋恢复对局状态"""
        board = make_board(MATE_IN_ONE)
        chariot = board.piece_at(Position(8, 5))
        board.make_move(Move(Position(8, 5), Position(8, 0), chariot))
        assert board.undo_move()
        assert board.status is GameStatus.PLAYING
        assert board.current_player is RED

    def test_stalemate_is_draw_by_default(self):
        """测试困毙默认判和"""
        board = make_board(BLACK_STALEMATED, current_player=BLACK)
        assert self.rule_engine.is_stalemate(board, BLACK)
        assert not self.rule_engine.is_checkmate(board, BLACK)
        assert board.status is GameStatus.DRAW

    def test_stalemate_as_loss(self):
        """测试困毙判负的规则"""
        board = make_board(BLACK_STALEMATED, current_player=BLACK,
                           rule_engine=RuleEngine(stalemate_is_loss=True))
        assert board.status is GameStatus.RED_WINS

    def test_game_status_report(self):
        """测试游戏状态报告"""
        status = self.rule_engine.get_game_status(self.board)
        assert status['current_player'] is RED
        assert status['current_player_name'] == "红方"
        assert status['in_check'] is False
        assert status['status'] is GameStatus.PLAYING
        assert status['legal_moves_count'] == 44
        assert len(status['legal_moves']) == 10
