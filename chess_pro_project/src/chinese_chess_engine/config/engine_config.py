"""
引擎配置数据结构

定义各种配置类和默认参数。
"""

from dataclasses import dataclass


@dataclass
class SearchConfig:
    """Alpha-Beta 搜索配置"""
    max_depth: int = 3                  # 默认搜索深度（难度）
    capture_first: bool = True          # 是否优先搜索吃子走法
    use_positional_bonus: bool = True   # 是否使用位置加分
    mobility_weight: int = 0            # 机动性权重，0表示不计算
    mate_score: int = 1000000           # 将死分值
    log_statistics: bool = True         # 是否记录搜索统计


@dataclass
class RulesConfig:
    """规则配置"""
    stalemate_is_loss: bool = False     # 困毙是否判负（否则为和棋）


@dataclass
class SessionConfig:
    """对局会话配置"""
    default_mode: str = 'ai_vs_player'  # 默认模式
    human_color: str = 'red'            # 人机对战中玩家执子颜色
    auto_ai_reply: bool = True          # 人机对战中玩家走子后AI是否自动应着
    undo_pairs_in_ai_mode: bool = True  # 人机对战悔棋时是否同时撤销AI的应着
    recognition_confidence_threshold: float = 0.7  # 识别结果的置信度阈值
    validate_imports: bool = True       # 导入局面时是否输出验证警告


@dataclass
class SystemConfig:
    """系统配置"""
    log_level: str = 'INFO'             # 日志级别
    log_file: str = ''                  # 日志文件，空字符串表示只输出到控制台
    log_dir: str = 'logs/chinese_chess_engine'  # 日志目录
    log_max_size: int = 10              # 日志文件最大大小(MB)
    log_backup_count: int = 5           # 日志备份数量


# 默认配置实例
DEFAULT_SEARCH_CONFIG = SearchConfig()
DEFAULT_RULES_CONFIG = RulesConfig()
DEFAULT_SESSION_CONFIG = SessionConfig()
DEFAULT_SYSTEM_CONFIG = SystemConfig()
