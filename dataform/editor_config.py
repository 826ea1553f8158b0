from dataclasses import dataclass
from typing import Optional

@dataclass
class EditorConfig:
    """编辑器配置 - 窗口、文件读写与状态栏参数"""
    window_title: str = "文本编辑器"
    window_width: int = 660
    window_height: int = 400
    encoding: Optional[str] = None          # None 表示使用平台默认编码
    file_filter: str = "文本文件 (*.txt *.log *.md *.py);;所有文件 (*)"
    status_timeout_ms: int = 5000           # 状态栏消息显示时长
    search_field_width: int = 20            # 搜索框宽度（字符数）
    search_timeout: Optional[float] = 30.0   # 单次搜索超时（秒），None 表示不限制
