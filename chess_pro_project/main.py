#!/usr/bin/env python3
"""
Chess Pro 主入口文件

提供命令行接口：终端对弈、走法建议和合法走法查询。
"""

import sys
from typing import List, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from chess_pro_project import __version__, __description__
from chess_pro_project.src.chinese_chess_engine import (
    ChessBoard, ConfigManager, GameMode, GameSession, GameStatus, Move,
    RuleEngine
)
from chess_pro_project.src.chinese_chess_engine.search_algorithm import AlphaBetaSearcher
from chess_pro_project.src.chinese_chess_engine.utils.logger import setup_logging

console = Console()

STATUS_TEXT = {
    GameStatus.PLAYING: "对局进行中",
    GameStatus.RED_WINS: "红方胜",
    GameStatus.BLACK_WINS: "黑方胜",
    GameStatus.DRAW: "和棋",
}


def print_banner():
    """打印项目横幅"""
    banner_text = Text()
    banner_text.append("♜ Chess Pro ♜\n", style="bold red")
    banner_text.append(f"版本: {__version__}\n", style="green")
    banner_text.append(__description__, style="white")

    panel = Panel(
        banner_text,
        title="中国象棋引擎",
        title_align="center",
        border_style="red",
        padding=(1, 2)
    )
    console.print(panel)


def render_board(board: ChessBoard, title: str = "棋盘"):
    """用 rich 渲染棋盘"""
    text = Text()
    for line in board.to_visual_string().splitlines():
        text.append(line + "\n")
    last_move = board.get_last_move()
    if last_move is not None:
        text.append(f"上一步: {last_move.to_chinese_notation()} ({last_move})\n", style="cyan")
    text.append(f"状态: {STATUS_TEXT[board.status]}", style="yellow")
    if board.is_in_check() and not board.status.is_terminal:
        text.append("  将军!", style="bold red")
    console.print(Panel(text, title=title, border_style="blue"))


def replay_moves(notations: List[str], rule_engine: Optional[RuleEngine] = None) -> ChessBoard:
    """
    从初始局面按坐标记法依次走子

    Args:
        notations: 坐标记法列表，如 ["八八五八", "二一三三"]
        rule_engine: 规则引擎

    Returns:
        ChessBoard: 走子后的棋盘
    """
    board = ChessBoard(rule_engine=rule_engine)
    for index, notation in enumerate(notations, start=1):
        move = Move.from_coordinate_notation(notation, board)
        if move is None or not board.make_move(move):
            raise click.BadParameter(f"第{index}步走法无效: {notation}", param_hint="--moves")
    return board


@click.group()
@click.version_option(version=__version__, prog_name="Chess Pro")
@click.option('--debug', is_flag=True, help='启用调试模式')
@click.option('--config-dir', type=click.Path(file_okay=False),
              default='chess_pro_project/configs/chinese_chess_engine', help='配置目录')
@click.pass_context
def cli(ctx: click.Context, debug: bool, config_dir: str):
    """中国象棋引擎 - 规则验证、Alpha-Beta 搜索与对局会话管理"""
    config_manager = ConfigManager(config_dir)

    setup_logging(config_manager.get_system_config(), debug)

    if debug:
        console.print("[yellow]调试模式已启用[/yellow]")

    ctx.obj = config_manager


@cli.command()
@click.pass_obj
def info(config_manager: ConfigManager):
    """显示系统信息"""
    print_banner()

    search_config = config_manager.get_search_config()
    rules_config = config_manager.get_rules_config()

    table = Table(title="引擎配置")
    table.add_column("配置项", style="cyan")
    table.add_column("值", style="green")
    table.add_row("配置目录", str(config_manager.config_dir))
    table.add_row("默认搜索深度", str(search_config.max_depth))
    table.add_row("吃子优先排序", "是" if search_config.capture_first else "否")
    table.add_row("位置加分", "是" if search_config.use_positional_bonus else "否")
    table.add_row("困毙判定", "判负" if rules_config.stalemate_is_loss else "和棋")
    console.print(table)


@cli.command()
@click.option('--depth', type=click.IntRange(min=0), default=None, help='搜索深度，默认使用配置')
@click.option('--color', type=click.Choice(['red', 'black']), default='red', help='玩家执子颜色')
@click.pass_obj
def play(config_manager: ConfigManager, depth: Optional[int], color: str):
    """在终端与引擎对弈"""
    search_config = config_manager.get_search_config()
    if depth is not None:
        search_config.max_depth = depth
    session_config = config_manager.get_session_config()
    session_config.default_mode = GameMode.AI_VS_PLAYER.value
    session_config.human_color = color

    console.print("[blue]输入坐标记法走子（如 八八五八），"
                  "输入 undo 悔棋，hint 提示，quit 退出[/blue]")

    with GameSession(search_config, session_config, config_manager.get_rules_config()) as session:
        # 玩家执黑时由AI先走
        session.restart().result()

        while True:
            render_board(session.board, title=f"第{session.board.move_count()}步")
            if session.board.status.is_terminal:
                console.print(f"[bold green]对局结束: {STATUS_TEXT[session.board.status]}[/bold green]")
                break

            command = click.prompt("走法", type=str).strip()
            if command in ('quit', 'exit', 'q'):
                break
            if command == 'undo':
                if not session.undo().result():
                    console.print("[yellow]没有可以撤销的走法[/yellow]")
                continue
            if command == 'hint':
                with console.status("[cyan]思考中...[/cyan]"):
                    hint = session.suggest_move().result()
                if hint is None:
                    console.print("[yellow]没有合法走法[/yellow]")
                else:
                    console.print(f"[green]建议: {hint.to_chinese_notation()} ({hint})[/green]")
                continue

            move = Move.from_coordinate_notation(command, session.board)
            if move is None:
                console.print(f"[red]无法解析走法: {command}[/red]")
                continue

            with console.status("[cyan]AI思考中...[/cyan]"):
                accepted = session.submit_move(move).result()
            if not accepted:
                console.print(f"[red]非法走法: {command}[/red]")


@cli.command()
@click.option('--moves', default='', help='从初始局面开始的坐标记法走法，以空格分隔')
@click.option('--depth', type=click.IntRange(min=0), default=None, help='搜索深度，默认使用配置')
@click.pass_obj
def suggest(config_manager: ConfigManager, moves: str, depth: Optional[int]):
    """计算指定局面的最佳走法"""
    rules_config = config_manager.get_rules_config()
    board = replay_moves(moves.split(), RuleEngine(rules_config.stalemate_is_loss))
    render_board(board)

    searcher = AlphaBetaSearcher(config_manager.get_search_config())
    with console.status("[cyan]搜索中...[/cyan]"):
        result = searcher.search(board, depth)

    if result.best_move is None:
        console.print("[yellow]当前玩家没有合法走法[/yellow]")
        return

    move = result.best_move
    console.print(f"[green]最佳走法: {move.to_chinese_notation()} ({move})[/green]")
    console.print(f"评分: {result.score}  深度: {result.stats.depth}  "
                  f"节点数: {result.stats.nodes}  剪枝次数: {result.stats.cutoffs}  "
                  f"耗时: {result.stats.time_used:.3f}秒")


@cli.command(name='legal-moves')
@click.option('--moves', default='', help='从初始局面开始的坐标记法走法，以空格分隔')
@click.pass_obj
def legal_moves(config_manager: ConfigManager, moves: str):
    """列出指定局面的全部合法走法"""
    rules_config = config_manager.get_rules_config()
    board = replay_moves(moves.split(), RuleEngine(rules_config.stalemate_is_loss))
    render_board(board)

    table = Table(title=f"{board.current_player.display_name}合法走法")
    table.add_column("#", justify="right")
    table.add_column("记法", style="cyan")
    table.add_column("坐标", style="green")
    table.add_column("吃子", style="red")
    for index, move in enumerate(board.legal_moves(), start=1):
        captured = move.captured_piece.symbol if move.captured_piece else ""
        table.add_row(str(index), move.to_chinese_notation(), str(move), captured)
    console.print(table)


def main():
    """主入口函数"""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]程序被用户中断[/yellow]")
        sys.exit(0)
    except Exception as e:
        console.print(f"[red]发生错误: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
