from typing import Optional, Iterable, Tuple

from dataform.search_result import Match, MatchList

from PyQt5.QtCore import QObject, pyqtSignal

class MatchNavigator(QObject):
    """
    匹配导航器 - 在一次搜索的结果上前后移动，支持首尾循环

    只在界面线程中使用；新的搜索会创建新的导航器而不是修改旧的。
    没有匹配时所有导航操作都是空操作，返回 None。
    """

    # 信号定义
    current_match_changed = pyqtSignal(object)  # 当前匹配变化

    def __init__(self, matches: Iterable[Match] = ()):
        super().__init__()
        self.matches: MatchList = tuple(matches)  # 所有匹配（不可变）
        self.current_index: Optional[int] = 0 if self.matches else None

    def is_empty(self) -> bool:
        return not self.matches

    def count(self) -> int:
        """获取匹配总数"""
        return len(self.matches)

    def current(self) -> Optional[Match]:
        """获取当前选中的匹配，不移动"""
        if self.current_index is None:
            return None
        return self.matches[self.current_index]

    def first(self) -> Optional[Match]:
        """回到第一个匹配"""
        return self._move_to(0)

    def next(self) -> Optional[Match]:
        """导航到下一个匹配，最后一个之后回到第一个"""
        if not self.matches:
            return None
        if self.current_index is None or self.current_index == len(self.matches) - 1:
            return self._move_to(0)
        return self._move_to(self.current_index + 1)

    def previous(self) -> Optional[Match]:
        """导航到上一个匹配，第一个之前回到最后一个"""
        if not self.matches:
            return None
        if self.current_index is None or self.current_index == 0:
            return self._move_to(len(self.matches) - 1)
        return self._move_to(self.current_index - 1)

    def navigate_to_index(self, index: int) -> Optional[Match]:
        """导航到指定索引的匹配，越界时不移动"""
        if not (0 <= index < len(self.matches)):
            return None
        return self._move_to(index)

    def selection_range(self) -> Optional[Tuple[int, int]]:
        """当前匹配的选区 (start, end)"""
        match = self.current()
        return match.span() if match else None

    def position_label(self) -> str:
        """状态栏显示用的位置文本，如 3/7"""
        if self.current_index is None:
            return "0/0"
        return f"{self.current_index + 1}/{len(self.matches)}"

    def _move_to(self, index: int) -> Optional[Match]:
        if not self.matches:
            return None
        self.current_index = index
        match = self.matches[index]
        self.current_match_changed.emit(match)
        return match
