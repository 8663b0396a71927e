"""
对局会话管理

会话是棋盘的唯一持有者。玩家走子、AI搜索、悔棋和导入识别结果都作为任务
提交到同一个工作线程顺序执行，调用方通过 Future 获取结果。
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from ..config.engine_config import RulesConfig, SearchConfig, SessionConfig
from ..rules_engine import (
    BoardValidator, ChessBoard, ChessPiece, GameStatus, Move,
    PieceColor, PieceType, Position, RuleEngine
)
from ..rules_engine.chess_board import PieceEntry
from ..search_algorithm import AlphaBetaSearcher
from ..utils.exceptions import GameStateError, InvalidMoveError


class GameMode(Enum):
    """会话模式枚举"""
    AI_VS_PLAYER = "ai_vs_player"                # 人机对战
    PLAYER_VS_PLAYER = "player_vs_player"        # 双人对战
    BOARD_EDIT = "board_edit"                    # 摆棋模式
    CAMERA_RECOGNITION = "camera_recognition"    # 相机识别


PLAY_MODES = (GameMode.AI_VS_PLAYER, GameMode.PLAYER_VS_PLAYER)


@dataclass(frozen=True)
class RecognitionResult:
    """棋盘识别结果"""
    pieces: List[PieceEntry]
    confidence: float


@dataclass(frozen=True)
class SessionState:
    """界面需要的会话状态快照"""
    mode: GameMode
    current_player: PieceColor
    status: GameStatus
    move_count: int
    in_check: bool = False
    is_thinking: bool = False
    last_move: Optional[Move] = None
    suggested_move: Optional[Move] = None
    recognition_confidence: Optional[float] = None
    validation_warnings: List[str] = field(default_factory=list)


class GameSession:
    """
    对局会话

    所有修改棋盘的操作都在单个工作线程中执行，同一时刻最多只有一个修改在进行。
    同类搜索请求在前一次完成前重复提交时，返回同一个 Future。
    """

    def __init__(self, search_config: Optional[SearchConfig] = None,
                 session_config: Optional[SessionConfig] = None,
                 rules_config: Optional[RulesConfig] = None):
        """
        初始化会话

        Args:
            search_config: 搜索配置
            session_config: 会话配置
            rules_config: 规则配置
        """
        self.logger = logging.getLogger(__name__)

        self.search_config = search_config or SearchConfig()
        self.session_config = session_config or SessionConfig()
        self.rules_config = rules_config or RulesConfig()

        self.board = ChessBoard(
            rule_engine=RuleEngine(stalemate_is_loss=self.rules_config.stalemate_is_loss)
        )
        self.searcher = AlphaBetaSearcher(self.search_config)
        self.validator = BoardValidator()

        self.mode = GameMode(self.session_config.default_mode)
        self.human_color = PieceColor(self.session_config.human_color)
        self.search_depth = self.search_config.max_depth

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="chess-session")
        self._lock = threading.Lock()
        self._pending_searches: Dict[str, Future] = {}
        self._closed = False

        self._is_thinking = False
        self._suggested_move: Optional[Move] = None
        self._recognition_confidence: Optional[float] = None
        self._validation_warnings: List[str] = []
        self._state = self._build_state()

        self.logger.info(f"对局会话初始化完成，模式: {self.mode.value}，搜索深度: {self.search_depth}")

    # ==================== 状态查询 ====================

    @property
    def state(self) -> SessionState:
        """最近一次操作后的会话状态"""
        with self._lock:
            return self._state

    @property
    def suggested_move(self) -> Optional[Move]:
        """当前的建议走法"""
        with self._lock:
            return self._suggested_move

    def _build_state(self) -> SessionState:
        board = self.board
        return SessionState(
            mode=self.mode,
            current_player=board.current_player,
            status=board.status,
            move_count=board.move_count(),
            in_check=board.is_in_check(),
            is_thinking=self._is_thinking,
            last_move=board.get_last_move(),
            suggested_move=self._suggested_move,
            recognition_confidence=self._recognition_confidence,
            validation_warnings=list(self._validation_warnings),
        )

    def _update_state(self):
        state = self._build_state()
        with self._lock:
            self._state = state

    def _set_thinking(self, thinking: bool):
        self._is_thinking = thinking
        self._update_state()

    # ==================== 任务提交 ====================

    def _submit(self, func: Callable, *args) -> Future:
        """提交任务到工作线程"""
        if self._closed:
            raise GameStateError("会话已关闭", "无法提交新的操作")
        return self._executor.submit(func, *args)

    def _submit_search(self, kind: str, func: Callable, *args) -> Future:
        """提交搜索任务；同类搜索尚未完成时返回已有的 Future"""
        with self._lock:
            pending = self._pending_searches.get(kind)
            if pending is not None and not pending.done():
                self.logger.debug(f"搜索请求合并到进行中的任务: {kind}")
                return pending
            future = self._submit(func, *args)
            self._pending_searches[kind] = future
            return future

    # ==================== 走子 ====================

    def submit_move(self, move: Move) -> Future:
        """
        提交玩家走法

        人机对战模式下走子成功后AI自动应着。

        Args:
            move: 玩家走法

        Returns:
            Future[bool]: 走法是否被接受
        """
        return self._submit(self._apply_human_move, move)

    def move_piece(self, from_pos: Position, to_pos: Position) -> Future:
        """
        按起点和终点提交走法，棋子取起点上的棋子

        Args:
            from_pos: 起点
            to_pos: 终点

        Returns:
            Future[bool]: 走法是否被接受
        """
        return self._submit(self._apply_move_by_positions, from_pos, to_pos)

    def apply_move_strict(self, move: Move) -> Future:
        """
        提交玩家走法，走法被拒绝时 Future 抛出 InvalidMoveError

        Args:
            move: 玩家走法

        Returns:
            Future[Move]: 执行的走法
        """
        return self._submit(self._apply_human_move_strict, move)

    def _apply_move_by_positions(self, from_pos: Position, to_pos: Position) -> bool:
        piece = self.board.piece_at(from_pos)
        if piece is None:
            self.logger.debug(f"起点无棋子: {from_pos}")
            return False
        return self._apply_human_move(Move(from_pos, to_pos, piece))

    def _apply_human_move_strict(self, move: Move) -> Move:
        if not self._apply_human_move(move):
            raise InvalidMoveError(move.to_coordinate_notation(), self._rejection_reason(move))
        return move

    def _rejection_reason(self, move: Move) -> str:
        if self.mode not in PLAY_MODES:
            return f"当前模式不能走子: {self.mode.value}"
        if self.board.status.is_terminal:
            return "对局已结束"
        if move.color is not self.board.current_player:
            return f"轮到{self.board.current_player.display_name}走子"
        return "不符合走子规则"

    def _apply_human_move(self, move: Move) -> bool:
        if self.mode not in PLAY_MODES:
            self.logger.debug(f"当前模式不能走子: {self.mode.value}")
            return False

        if self.mode is GameMode.AI_VS_PLAYER and self.board.current_player is not self.human_color:
            self.logger.debug("当前轮到AI走子")
            return False

        if not self.board.make_move(move):
            return False

        self._suggested_move = None
        self._update_state()
        self.logger.debug(f"玩家走法: {move}")

        if self._ai_should_reply():
            self._play_ai_move()
        return True

    def _ai_should_reply(self) -> bool:
        return (self.mode is GameMode.AI_VS_PLAYER and
                self.session_config.auto_ai_reply and
                not self.board.status.is_terminal and
                self.board.current_player is not self.human_color)

    # ==================== AI ====================

    def request_ai_move(self) -> Future:
        """
        让AI为当前玩家走一步

        摆棋和相机识别模式下不走子。

        Returns:
            Future[Optional[Move]]: AI执行的走法，没有合法走法或不能走子时为None
        """
        return self._submit_search("ai_move", self._play_ai_move)

    def suggest_move(self, depth: Optional[int] = None) -> Future:
        """
        计算当前局面的建议走法，不修改棋盘

        Args:
            depth: 搜索深度，None表示使用会话的搜索深度

        Returns:
            Future[Optional[Move]]: 建议走法
        """
        return self._submit_search("suggest", self._compute_suggestion, depth)

    def _search(self, depth: Optional[int] = None) -> Optional[Move]:
        self._set_thinking(True)
        try:
            return self.searcher.find_best_move(
                self.board, self.search_depth if depth is None else depth
            )
        finally:
            self._set_thinking(False)

    def _play_ai_move(self) -> Optional[Move]:
        if self.mode not in PLAY_MODES:
            self.logger.debug(f"当前模式不能走子: {self.mode.value}")
            return None

        if self.board.status.is_terminal:
            self.logger.debug("对局已结束，AI不再走子")
            return None

        move = self._search()
        if move is None:
            return None

        if not self.board.make_move(move):
            raise GameStateError("AI走法被拒绝", str(move))

        self._suggested_move = move
        self._update_state()
        self.logger.info(f"AI走法: {move.to_chinese_notation()}")
        return move

    def _compute_suggestion(self, depth: Optional[int] = None) -> Optional[Move]:
        move = self._search(depth)
        self._suggested_move = move
        self._update_state()
        if move is not None:
            self.logger.info(f"建议走法: {move.to_chinese_notation()}")
        return move

    # ==================== 悔棋与重开 ====================

    def undo(self) -> Future:
        """
        悔棋

        人机对战模式下同时撤销AI的应着，使轮次回到玩家。

        Returns:
            Future[bool]: 是否撤销成功
        """
        return self._submit(self._undo)

    def _undo(self) -> bool:
        if not self.board.undo_move():
            return False

        if (self.mode is GameMode.AI_VS_PLAYER and
                self.session_config.undo_pairs_in_ai_mode and
                self.board.current_player is not self.human_color):
            self.board.undo_move()

        self._suggested_move = None
        self._update_state()
        return True

    def restart(self) -> Future:
        """
        重新开始

        Returns:
            Future[None]
        """
        return self._submit(self._restart)

    def _restart(self):
        self.board.reset()
        self._suggested_move = None
        self._validation_warnings = []
        self._update_state()
        self.logger.info("对局重新开始")

        if self._ai_should_reply():
            self._play_ai_move()

    def set_mode(self, mode: GameMode) -> Future:
        """
        切换会话模式

        除相机识别模式外，切换模式会重置棋盘。

        Args:
            mode: 新模式

        Returns:
            Future[None]
        """
        return self._submit(self._set_mode, mode)

    def _set_mode(self, mode: GameMode):
        self.mode = mode
        self.logger.info(f"切换模式: {mode.value}")
        if mode is GameMode.CAMERA_RECOGNITION:
            self._suggested_move = None
            self._update_state()
            return
        self._restart()

    # ==================== 局面导入 ====================

    def import_recognition(self, result: RecognitionResult) -> Future:
        """
        导入识别结果

        置信度高于阈值时替换棋盘局面并计算建议走法。

        Args:
            result: 识别结果

        Returns:
            Future[bool]: 是否接受该结果
        """
        return self._submit(self._import_recognition, result)

    def _import_recognition(self, result: RecognitionResult) -> bool:
        self._recognition_confidence = result.confidence
        threshold = self.session_config.recognition_confidence_threshold

        if result.confidence <= threshold:
            self.logger.warning(f"识别置信度过低: {result.confidence:.2f} <= {threshold:.2f}")
            self._update_state()
            return False

        self._set_position(result.pieces, PieceColor.RED)
        self.logger.info(f"导入识别局面，置信度: {result.confidence:.2f}，棋子数: {len(result.pieces)}")
        self._compute_suggestion()
        return True

    def import_position(self, pieces: Iterable[PieceEntry],
                        current_player: PieceColor = PieceColor.RED) -> Future:
        """
        导入手动摆放的局面

        Args:
            pieces: 棋子列表
            current_player: 先走的一方

        Returns:
            Future[None]
        """
        return self._submit(self._set_position, list(pieces), current_player)

    def _set_position(self, pieces: Iterable[PieceEntry], current_player: PieceColor):
        self.board.set_position(pieces, current_player)
        self._suggested_move = None

        self._validation_warnings = []
        if self.session_config.validate_imports:
            is_valid, errors = self.validator.full_validation(self.board)
            if not is_valid:
                for error in errors:
                    self.logger.warning(f"局面验证警告: {error}")
                self._validation_warnings = errors
        self._update_state()

    # ==================== 摆棋模式 ====================

    def _require_edit_mode(self):
        if self.mode is not GameMode.BOARD_EDIT:
            raise GameStateError(f"当前模式为{self.mode.value}", "只有摆棋模式可以编辑棋盘")

    def add_piece(self, piece_type: PieceType, color: PieceColor, position: Position) -> Future:
        """
        在空位上添加棋子（摆棋模式）

        Returns:
            Future[bool]: 位置已有棋子时为False
        """
        return self._submit(self._add_piece, piece_type, color, position)

    def _add_piece(self, piece_type: PieceType, color: PieceColor, position: Position) -> bool:
        self._require_edit_mode()
        if not self.board.is_empty(position):
            return False
        pieces = self.board.get_all_pieces() + [ChessPiece(piece_type, color, position)]
        self._set_position(pieces, self.board.current_player)
        return True

    def remove_piece(self, position: Position) -> Future:
        """
        移除指定位置的棋子（摆棋模式）

        Returns:
            Future[Optional[ChessPiece]]: 被移除的棋子，空位时为None
        """
        return self._submit(self._remove_piece, position)

    def _remove_piece(self, position: Position) -> Optional[ChessPiece]:
        self._require_edit_mode()
        removed = self.board.piece_at(position)
        if removed is None:
            return None
        pieces = [piece for piece in self.board.get_all_pieces() if piece.position != position]
        self._set_position(pieces, self.board.current_player)
        return removed

    def clear_board(self) -> Future:
        """清除所有棋子（摆棋模式）"""
        return self._submit(self._clear_board)

    def _clear_board(self):
        self._require_edit_mode()
        self._set_position([], self.board.current_player)

    def set_side_to_move(self, color: PieceColor) -> Future:
        """设置先走的一方（摆棋模式）"""
        return self._submit(self._set_side_to_move, color)

    def _set_side_to_move(self, color: PieceColor):
        self._require_edit_mode()
        self._set_position(self.board.get_all_pieces(), color)

    # ==================== 生命周期 ====================

    def close(self):
        """等待已提交的任务完成并关闭工作线程"""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)
        self.logger.info("对局会话已关闭")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
