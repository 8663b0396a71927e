"""
测试对局会话

测试人机对战自动应着、悔棋、模式切换、识别结果导入和摆棋模式。
"""

import threading

import pytest

from chess_pro_project.src.chinese_chess_engine.config.engine_config import SearchConfig, SessionConfig
from chess_pro_project.src.chinese_chess_engine.inference_interface import (
    GameMode, GameSession, RecognitionResult
)
from chess_pro_project.src.chinese_chess_engine.rules_engine import (
    GameStatus, Move, PieceColor, PieceType, Position
)
from chess_pro_project.src.chinese_chess_engine.utils.exceptions import GameStateError, InvalidMoveError


RED = PieceColor.RED
BLACK = PieceColor.BLACK

TIMEOUT = 60

RECOGNIZED_PIECES = [
    (PieceType.GENERAL, RED, Position(3, 9)),
    (PieceType.GENERAL, BLACK, Position(4, 0)),
    (PieceType.CHARIOT, RED, Position(0, 1)),
    (PieceType.CHARIOT, RED, Position(8, 5)),
]


class TestGameSession:
    """GameSession类的测试"""

    def setup_method(self):
        """每个测试方法前的设置"""
        self.session = GameSession(SearchConfig(max_depth=1, log_statistics=False))

    def teardown_method(self):
        """每个测试方法后的清理"""
        self.session.close()

    def _cannon_move(self):
        board = self.session.board
        return Move(Position(7, 7), Position(4, 7), board.piece_at(Position(7, 7)))

    def test_initial_state(self):
        """测试初始会话状态"""
        state = self.session.state
        assert state.mode is GameMode.AI_VS_PLAYER
        assert state.current_player is RED
        assert state.status is GameStatus.PLAYING
        assert state.move_count == 0
        assert not state.is_thinking

    def test_ai_replies_after_human_move(self):
        """测试人机对战中玩家走子后AI自动应着"""
        assert self.session.submit_move(self._cannon_move()).result(TIMEOUT)

        board = self.session.board
        assert board.move_count() == 2
        assert board.current_player is RED
        assert board.get_last_move().color is BLACK

        state = self.session.state
        assert state.move_count == 2
        assert state.last_move == board.get_last_move()
        assert state.suggested_move == board.get_last_move()

    def test_illegal_move_rejected(self):
        """测试非法走法被拒绝"""
        soldier = self.session.board.piece_at(Position(4, 6))
        assert not self.session.submit_move(Move(Position(4, 6), Position(4, 4), soldier)).result(TIMEOUT)
        assert self.session.board.move_count() == 0

    def test_move_by_positions(self):
        """测试按起点和终点走子"""
        assert self.session.move_piece(Position(1, 9), Position(2, 7)).result(TIMEOUT)
        assert not self.session.move_piece(Position(4, 4), Position(4, 3)).result(TIMEOUT)
        assert self.session.board.move_count() == 2

    def test_apply_move_strict(self):
        """测试严格模式下非法走法抛出异常"""
        soldier = self.session.board.piece_at(Position(4, 6))
        future = self.session.apply_move_strict(Move(Position(4, 6), Position(3, 6), soldier))
        with pytest.raises(InvalidMoveError):
            future.result(TIMEOUT)

        move = self._cannon_move()
        assert self.session.apply_move_strict(move).result(TIMEOUT) == move

    def test_undo_in_ai_mode_removes_pair(self):
        """测试人机对战悔棋同时撤销AI的应着"""
        self.session.submit_move(self._cannon_move()).result(TIMEOUT)
        assert self.session.undo().result(TIMEOUT)

        assert self.session.board.move_count() == 0
        assert self.session.board.current_player is RED
        assert self.session.state.suggested_move is None
        assert not self.session.undo().result(TIMEOUT)

    def test_ai_moves_first_when_human_is_black(self):
        """测试玩家执黑时AI先走"""
        session = GameSession(SearchConfig(max_depth=1, log_statistics=False),
                              SessionConfig(human_color='black'))
        try:
            session.restart().result(TIMEOUT)
            assert session.board.move_count() == 1
            assert session.board.current_player is BLACK
        finally:
            session.close()

    def test_player_vs_player(self):
        """测试双人对战不会自动应着"""
        self.session.set_mode(GameMode.PLAYER_VS_PLAYER).result(TIMEOUT)
        assert self.session.submit_move(self._cannon_move()).result(TIMEOUT)
        assert self.session.board.move_count() == 1

        horse = self.session.board.piece_at(Position(1, 0))
        assert self.session.submit_move(Move(Position(1, 0), Position(2, 2), horse)).result(TIMEOUT)
        assert self.session.board.move_count() == 2

        assert self.session.undo().result(TIMEOUT)
        assert self.session.board.move_count() == 1

    def test_request_ai_move(self):
        """测试请求AI走一步"""
        self.session.set_mode(GameMode.PLAYER_VS_PLAYER).result(TIMEOUT)
        move = self.session.request_ai_move().result(TIMEOUT)
        assert move is not None
        assert self.session.board.get_last_move() == move

    def test_request_ai_move_outside_play_modes(self):
        """测试摆棋和相机模式下AI不走子"""
        for mode in (GameMode.BOARD_EDIT, GameMode.CAMERA_RECOGNITION):
            self.session.set_mode(mode).result(TIMEOUT)
            assert self.session.request_ai_move().result(TIMEOUT) is None
            assert self.session.board.move_count() == 0
            assert self.session.board.current_player is RED

    def test_suggest_move_does_not_change_board(self):
        """测试建议走法不修改棋盘"""
        suggestion = self.session.suggest_move().result(TIMEOUT)
        assert suggestion in self.session.board.legal_moves()
        assert self.session.board.move_count() == 0
        assert self.session.suggested_move == suggestion

    def test_single_flight_search(self):
        """测试搜索进行中重复请求返回同一个任务"""
        gate = threading.Event()
        blocker = self.session._submit(gate.wait, TIMEOUT)

        first = self.session.suggest_move()
        second = self.session.suggest_move()
        assert first is second

        gate.set()
        blocker.result(TIMEOUT)
        assert first.result(TIMEOUT) is not None

        third = self.session.suggest_move()
        assert third is not first
        third.result(TIMEOUT)

    def test_set_mode_resets_board_except_camera(self):
        """测试切换模式时重置棋盘，相机模式除外"""
        self.session.set_mode(GameMode.PLAYER_VS_PLAYER).result(TIMEOUT)
        self.session.submit_move(self._cannon_move()).result(TIMEOUT)

        self.session.set_mode(GameMode.CAMERA_RECOGNITION).result(TIMEOUT)
        assert self.session.board.move_count() == 1
        assert self.session.state.mode is GameMode.CAMERA_RECOGNITION

        self.session.set_mode(GameMode.BOARD_EDIT).result(TIMEOUT)
        assert self.session.board.move_count() == 0
        assert len(self.session.board.get_all_pieces()) == 32

    def test_moves_rejected_outside_play_modes(self):
        """测试摆棋和相机模式下不能走子"""
        for mode in (GameMode.BOARD_EDIT, GameMode.CAMERA_RECOGNITION):
            self.session.set_mode(mode).result(TIMEOUT)
            assert not self.session.submit_move(self._cannon_move()).result(TIMEOUT)

    def test_recognition_low_confidence_rejected(self):
        """测试置信度不高于阈值的识别结果被拒绝"""
        for confidence in (0.5, 0.7):
            accepted = self.session.import_recognition(
                RecognitionResult(RECOGNIZED_PIECES, confidence)
            ).result(TIMEOUT)
            assert not accepted
            assert len(self.session.board.get_all_pieces()) == 32
        assert self.session.state.recognition_confidence == 0.7

    def test_recognition_accepted_with_suggestion(self):
        """测试识别结果被接受后计算建议走法"""
        self.session.set_mode(GameMode.CAMERA_RECOGNITION).result(TIMEOUT)
        accepted = self.session.import_recognition(
            RecognitionResult(RECOGNIZED_PIECES, 0.95)
        ).result(TIMEOUT)

        assert accepted
        board = self.session.board
        assert len(board.get_all_pieces()) == 4
        assert board.current_player is RED
        assert board.move_count() == 0

        state = self.session.state
        assert state.recognition_confidence == 0.95
        assert state.suggested_move in board.legal_moves()

    def test_recognition_of_invalid_board_accepted_with_warnings(self):
        """测试结构不合法的局面照常导入，只给出警告"""
        pieces = [(PieceType.GENERAL, RED, Position(4, 9)),
                  (PieceType.CHARIOT, RED, Position(0, 0))]
        assert self.session.import_recognition(RecognitionResult(pieces, 0.9)).result(TIMEOUT)

        state = self.session.state
        assert state.status is GameStatus.RED_WINS
        assert state.validation_warnings

    def test_import_position(self):
        """测试导入手动摆放的局面"""
        self.session.import_position(RECOGNIZED_PIECES, current_player=BLACK).result(TIMEOUT)
        assert self.session.board.current_player is BLACK
        assert len(self.session.board.get_all_pieces()) == 4
        assert self.session.state.validation_warnings == []

    def test_edit_operations_require_edit_mode(self):
        """测试非摆棋模式下不能编辑棋盘"""
        future = self.session.add_piece(PieceType.HORSE, RED, Position(4, 4))
        with pytest.raises(GameStateError):
            future.result(TIMEOUT)
        with pytest.raises(GameStateError):
            self.session.clear_board().result(TIMEOUT)

    def test_board_edit(self):
        """测试摆棋模式的添加、移除和清空"""
        self.session.set_mode(GameMode.BOARD_EDIT).result(TIMEOUT)

        self.session.clear_board().result(TIMEOUT)
        assert self.session.board.get_all_pieces() == []

        assert self.session.add_piece(PieceType.GENERAL, RED, Position(4, 9)).result(TIMEOUT)
        assert self.session.add_piece(PieceType.GENERAL, BLACK, Position(3, 0)).result(TIMEOUT)
        assert not self.session.add_piece(PieceType.HORSE, RED, Position(4, 9)).result(TIMEOUT)
        assert self.session.add_piece(PieceType.HORSE, RED, Position(2, 5)).result(TIMEOUT)
        assert len(self.session.board.get_all_pieces()) == 3

        removed = self.session.remove_piece(Position(2, 5)).result(TIMEOUT)
        assert removed.type is PieceType.HORSE
        assert self.session.remove_piece(Position(2, 5)).result(TIMEOUT) is None

        self.session.set_side_to_move(BLACK).result(TIMEOUT)
        assert self.session.board.current_player is BLACK
        assert self.session.board.status is GameStatus.PLAYING

    def test_closed_session_rejects_commands(self):
        """测试关闭后的会话不再接受操作"""
        self.session.close()
        with pytest.raises(GameStateError):
            self.session.restart()

    def test_context_manager(self):
        """测试上下文管理器"""
        with GameSession(SearchConfig(max_depth=1, log_statistics=False)) as session:
            assert session.suggest_move().result(TIMEOUT) is not None
        with pytest.raises(GameStateError):
            session.undo()
