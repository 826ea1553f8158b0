import os
import time

import pytest

# 无显示环境下运行界面测试
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5.QtWidgets import QApplication
from PyQt5.QtCore import QEventLoop, QTimer


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def wait_for_signal(qapp):
    """运行事件循环直到信号发出，返回信号参数；超时返回 None"""

    def wait(signal, trigger=None, timeout_ms: int = 10000):
        loop = QEventLoop()
        received = []

        def on_emit(*args):
            received.append(args)
            loop.quit()

        signal.connect(on_emit)
        QTimer.singleShot(timeout_ms, loop.quit)
        if trigger is not None:
            trigger()
        if not received:
            loop.exec_()
        signal.disconnect(on_emit)
        return received[0] if received else None

    return wait


@pytest.fixture
def wait_until(qapp):
    """处理事件直到条件成立"""

    def wait(condition, timeout: float = 10.0) -> bool:
        deadline = time.time() + timeout
        while time.time() < deadline:
            qapp.processEvents()
            if condition():
                return True
            time.sleep(0.01)
        return condition()

    return wait


@pytest.fixture
def ui_gap_recorder(qapp):
    """处理事件直到条件成立，并记录两次事件处理之间的最大间隔（秒）"""

    def record(condition, timeout: float = 10.0) -> float:
        deadline = time.time() + timeout
        last = time.time()
        max_gap = 0.0
        while time.time() < deadline and not condition():
            qapp.processEvents()
            now = time.time()
            max_gap = max(max_gap, now - last)
            last = now
            time.sleep(0.01)
        return max_gap

    return record
