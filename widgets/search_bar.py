from PyQt5.QtWidgets import (QWidget, QHBoxLayout, QPushButton, QLineEdit,
                             QCheckBox, QStyle)
from PyQt5.QtCore import pyqtSignal

from logic.search_engine import SearchOptions

class SearchBar(QWidget):
    """
    工具栏 - 保存/打开按钮、搜索框、上一个/下一个、正则选项
    """

    # 信号定义
    save_requested = pyqtSignal()
    open_requested = pyqtSignal()
    search_requested = pyqtSignal(str, object)  # (搜索内容, SearchOptions)
    previous_requested = pyqtSignal()
    next_requested = pyqtSignal()
    regex_toggled = pyqtSignal(bool)

    def __init__(self, field_width: int = 20, parent=None):
        super().__init__(parent)
        self._build(field_width)
        self._bind_actions()

    def _build(self, field_width: int):
        layout = QHBoxLayout(self)
        layout.setContentsMargins(5, 5, 5, 5)
        layout.setSpacing(5)

        style = self.style()
        self.save_button = QPushButton(style.standardIcon(QStyle.SP_DialogSaveButton), "")
        self.save_button.setObjectName("SaveButton")
        self.save_button.setToolTip("保存")

        self.open_button = QPushButton(style.standardIcon(QStyle.SP_DirOpenIcon), "")
        self.open_button.setObjectName("OpenButton")
        self.open_button.setToolTip("打开")

        self.search_field = QLineEdit()
        self.search_field.setObjectName("SearchField")
        self.search_field.setPlaceholderText("搜索...")
        self.search_field.setMinimumWidth(field_width * self.fontMetrics().averageCharWidth())

        self.search_button = QPushButton("搜索")
        self.search_button.setObjectName("StartSearchButton")

        self.previous_button = QPushButton("上一个")
        self.previous_button.setObjectName("PreviousMatchButton")

        self.next_button = QPushButton("下一个")
        self.next_button.setObjectName("NextMatchButton")

        self.regex_check = QCheckBox("使用正则")
        self.regex_check.setObjectName("UseRegExCheckbox")

        self.case_check = QCheckBox("忽略大小写")
        self.case_check.setObjectName("IgnoreCaseCheckbox")

        self.whole_word_check = QCheckBox("全词匹配")
        self.whole_word_check.setObjectName("WholeWordCheckbox")

        for widget in (self.save_button, self.open_button, self.search_field,
                       self.search_button, self.previous_button, self.next_button,
                       self.regex_check, self.case_check, self.whole_word_check):
            layout.addWidget(widget)
        layout.addStretch()

    def _bind_actions(self):
        """绑定控件事件"""
        self.save_button.clicked.connect(self.save_requested)
        self.open_button.clicked.connect(self.open_requested)
        self.search_button.clicked.connect(self.request_search)
        self.search_field.returnPressed.connect(self.request_search)
        self.previous_button.clicked.connect(self.previous_requested)
        self.next_button.clicked.connect(self.next_requested)
        self.regex_check.toggled.connect(self.regex_toggled)

    def query(self) -> str:
        return self.search_field.text()

    def options(self) -> SearchOptions:
        """当前勾选的搜索选项"""
        return SearchOptions(
            use_regex=self.regex_check.isChecked(),
            ignore_case=self.case_check.isChecked(),
            whole_word=self.whole_word_check.isChecked()
        )

    def set_regex_checked(self, checked: bool):
        """同步菜单中的正则选项，状态相同时不做任何事"""
        if self.regex_check.isChecked() != checked:
            self.regex_check.setChecked(checked)

    def request_search(self):
        self.search_requested.emit(self.query(), self.options())
