from PyQt5.QtWidgets import QPlainTextEdit
from PyQt5.QtGui import QFont, QTextCursor
from typing import Optional

from dataform.search_result import Match


def to_qt_position(text: str, offset: int) -> int:
    """Python 字符偏移 -> Qt 文档位置（Qt 按 UTF-16 单元计数）"""
    prefix = text[:offset]
    if prefix.isascii():
        return offset
    return len(prefix.encode('utf-16-le')) // 2


class TextArea(QPlainTextEdit):
    """
    可编辑文本区域 - 负责把搜索匹配渲染为选区
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("TextArea")
        self._initFont()

    def _initFont(self):
        font = QFont("Consolas", 11)
        font.setStyleHint(QFont.Monospace)
        self.setFont(font)

    def select_match(self, match: Optional[Match], text: Optional[str] = None):
        """
        选中匹配范围 [offset, offset + len)，光标移到范围末尾

        Args:
            match: 要显示的匹配，None 时不做任何事
            text: 搜索时使用的文档文本，默认取当前内容
        """
        if match is None:
            return

        if text is None:
            text = self.toPlainText()
        start = to_qt_position(text, match.offset)
        end = to_qt_position(text, match.end)

        cursor = self.textCursor()
        cursor.setPosition(start)
        cursor.setPosition(end, QTextCursor.KeepAnchor)
        self.setTextCursor(cursor)
        self.ensureCursorVisible()
        self.setFocus()

    def selection_span(self) -> tuple[int, int]:
        """当前选区 (start, end)，按 Qt 位置"""
        cursor = self.textCursor()
        return cursor.selectionStart(), cursor.selectionEnd()

    def clear_match_selection(self):
        """清除选区，保留光标位置"""
        cursor = self.textCursor()
        cursor.clearSelection()
        self.setTextCursor(cursor)
