from PyQt5.QtWidgets import (QMainWindow, QVBoxLayout, QWidget, QAction,
                             QFileDialog, QMessageBox)
from PyQt5.QtGui import QKeySequence, QDragEnterEvent, QDropEvent

import os
from typing import Optional

from widgets.text_area import TextArea
from widgets.search_bar import SearchBar
from logic.search_manager import MatchNavigator
from logic.file_io import FileHandler, FileOperationError
from logic.parallel_search import SearchCoordinator
from logic.search_engine import SearchOptions, SearchStats
from dataform.search_result import Match
from dataform.editor_config import EditorConfig

class MainWindow(QMainWindow):
    def __init__(self, config: Optional[EditorConfig] = None):
        super().__init__()
        self.config = config or EditorConfig()

        self.file_handler = FileHandler(self.config.encoding)
        self.coordinator = SearchCoordinator(self.config.search_timeout)
        self.navigator = MatchNavigator()    # 当前搜索结果，只在界面线程中替换
        self.current_file: Optional[str] = None
        self._search_snapshot = ""           # 当前导航器结果所对应的文档快照

        self.setWindowTitle(self.config.window_title)
        self.resize(self.config.window_width, self.config.window_height)

        self._build_ui()
        self._build_menus()
        self._bind_ui_actions()

        # 启用拖拽打开文件
        self.setAcceptDrops(True)

    def _build_ui(self):
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)

        self.search_bar = SearchBar(self.config.search_field_width)
        self.text_area = TextArea()

        layout.addWidget(self.search_bar)
        layout.addWidget(self.text_area)
        self.setCentralWidget(central)

    def _build_menus(self):
        """创建文件/搜索菜单"""
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("文件(&F)")
        file_menu.setObjectName("MenuFile")
        self.menu_open = self._add_action(file_menu, "打开", "MenuOpen", QKeySequence.Open)
        self.menu_save = self._add_action(file_menu, "保存", "MenuSave", QKeySequence.Save)
        file_menu.addSeparator()
        self.menu_exit = self._add_action(file_menu, "退出", "MenuExit", QKeySequence.Quit)

        search_menu = menu_bar.addMenu("搜索(&S)")
        search_menu.setObjectName("MenuSearch")
        self.menu_start_search = self._add_action(search_menu, "开始搜索", "MenuStartSearch",
                                                  QKeySequence.Find)
        self.menu_previous_match = self._add_action(search_menu, "上一个匹配", "MenuPreviousMatch",
                                                    QKeySequence.FindPrevious)
        self.menu_next_match = self._add_action(search_menu, "下一个匹配", "MenuNextMatch",
                                                QKeySequence.FindNext)
        self.menu_use_regex = self._add_action(search_menu, "使用正则", "MenuUseRegExp")
        self.menu_use_regex.setCheckable(True)

    def _add_action(self, menu, text: str, name: str, shortcut=None) -> QAction:
        action = QAction(text, self)
        action.setObjectName(name)
        if shortcut is not None:
            action.setShortcut(QKeySequence(shortcut))
        menu.addAction(action)
        return action

    def _bind_ui_actions(self):
        """绑定UI事件"""
        self.menu_open.triggered.connect(self._open_file)
        self.menu_save.triggered.connect(self._save_file)
        self.menu_exit.triggered.connect(self.close)
        self.menu_start_search.triggered.connect(self.search_bar.request_search)
        self.menu_previous_match.triggered.connect(self.previous_match)
        self.menu_next_match.triggered.connect(self.next_match)

        # 菜单与工具栏的正则选项保持一致
        self.menu_use_regex.toggled.connect(self.search_bar.set_regex_checked)
        self.search_bar.regex_toggled.connect(self._sync_regex_menu)

        self.search_bar.open_requested.connect(self._open_file)
        self.search_bar.save_requested.connect(self._save_file)
        self.search_bar.search_requested.connect(self.start_search)
        self.search_bar.previous_requested.connect(self.previous_match)
        self.search_bar.next_requested.connect(self.next_match)

        self.coordinator.search_started.connect(self._on_search_started)
        self.coordinator.results_ready.connect(self._on_results_ready)
        self.coordinator.search_error.connect(self._on_search_error)
        self.coordinator.search_cancelled.connect(self._on_search_cancelled)
        self.coordinator.stats_ready.connect(self._on_search_stats)

    def _sync_regex_menu(self, checked: bool):
        if self.menu_use_regex.isChecked() != checked:
            self.menu_use_regex.setChecked(checked)

    # ---------------------------------------------------------------- 搜索

    def start_search(self, query: str, options: Optional[SearchOptions] = None):
        """在后台线程中搜索当前文档快照"""
        self.coordinator.start_search(self.text_area.toPlainText(), query,
                                      options or self.search_bar.options())

    def next_match(self):
        self._show_match(self.navigator.next())

    def previous_match(self):
        self._show_match(self.navigator.previous())

    def _show_match(self, match: Optional[Match]):
        """把匹配渲染为选区；没有匹配时什么也不做"""
        if match is None:
            return
        self.text_area.select_match(match, self._search_snapshot)
        self._show_status(f"匹配 {self.navigator.position_label()}")

    def _on_search_started(self, sequence: int):
        self._show_status(f"正在搜索 (#{sequence})...")

    def _on_results_ready(self, navigator: MatchNavigator, document: str):
        """新结果替换旧的导航器，自动选中第一个匹配"""
        self.navigator = navigator
        self._search_snapshot = document
        if navigator.is_empty():
            self.text_area.clear_match_selection()
            self._show_status("未找到匹配")
            return
        self._show_match(navigator.current())

    def _on_search_error(self, message: str):
        self._show_status("搜索失败")
        QMessageBox.warning(self, "搜索错误", message)

    def _on_search_cancelled(self, sequence: int):
        if self.coordinator.is_latest(sequence):
            self._show_status("搜索已停止")

    def _on_search_stats(self, stats: SearchStats):
        self.text_area.setToolTip(stats.summary())

    # ---------------------------------------------------------------- 文件

    def _open_file(self):
        file_path, _ = QFileDialog.getOpenFileName(self, "打开文件", self._dialog_dir(),
                                                   self.config.file_filter)
        if file_path:
            self.load_file(file_path)

    def _save_file(self):
        suggested = self.current_file or self._dialog_dir()
        file_path, _ = QFileDialog.getSaveFileName(self, "保存文件", suggested,
                                                   self.config.file_filter)
        if file_path:
            self.save_file(file_path)

    def load_file(self, file_path: str) -> bool:
        """读取文件到编辑区，失败时提示用户"""
        try:
            text = self.file_handler.load_file(file_path)
        except FileOperationError as e:
            QMessageBox.warning(self, "打开失败", f"无法读取文件:\n{e}")
            return False

        self.text_area.setPlainText(text)
        self.navigator = MatchNavigator()
        self._search_snapshot = ""
        self._set_current_file(file_path)
        self._show_status(f"已打开 {os.path.basename(file_path)}")
        return True

    def save_file(self, file_path: str) -> bool:
        """把整个文档写入文件，失败时提示用户"""
        try:
            self.file_handler.save_file(file_path, self.text_area.toPlainText())
        except FileOperationError as e:
            QMessageBox.warning(self, "保存失败", f"无法保存文件:\n{e}")
            return False

        self._set_current_file(file_path)
        self._show_status(f"已保存 {os.path.basename(file_path)}")
        return True

    def _set_current_file(self, file_path: str):
        self.current_file = file_path
        self.setWindowTitle(f"{os.path.basename(file_path)} - {self.config.window_title}")

    def _dialog_dir(self) -> str:
        return os.path.dirname(self.current_file) if self.current_file else ""

    def _show_status(self, message: str):
        self.statusBar().showMessage(message, self.config.status_timeout_ms)

    # ---------------------------------------------------------------- 事件

    def dragEnterEvent(self, event: QDragEnterEvent):
        """拖拽进入事件"""
        if event.mimeData().hasUrls():
            for url in event.mimeData().urls():
                if url.isLocalFile():
                    event.acceptProposedAction()
                    return
        event.ignore()

    def dropEvent(self, event: QDropEvent):
        """拖拽放下事件 - 单文档编辑器，只打开第一个本地文件"""
        for url in event.mimeData().urls():
            if url.isLocalFile():
                self.load_file(url.toLocalFile())
                break
        event.acceptProposedAction()

    def closeEvent(self, event):
        """窗口关闭事件 - 确保搜索线程停止"""
        self.coordinator.stop_all()
        event.accept()
        super().closeEvent(event)
