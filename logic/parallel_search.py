from PyQt5.QtCore import QObject, QThread, pyqtSignal, QMutex, QMutexLocker
from typing import Dict, Optional
import multiprocessing as mp
import time

from logic.search_engine import (SearchOptions, SearchStats, InvalidPatternError,
                                 check_query, run_search_process)
from logic.search_manager import MatchNavigator

class SearchWorker(QThread):
    """
    后台搜索线程 - 在独立进程中对文档快照执行查找，本线程只等待结果

    正则匹配期间 re 持有 GIL，放在本线程里会卡住界面，所以扫描交给子进程；
    停止或超时时直接结束子进程。
    """

    # 信号定义
    search_completed = pyqtSignal(int, object)  # (序号, MatchList)
    search_failed = pyqtSignal(int, str)        # (序号, 错误信息)
    search_cancelled = pyqtSignal(int)          # 序号
    search_stats = pyqtSignal(int, object)      # (序号, SearchStats)

    POLL_INTERVAL = 0.05  # 等待子进程结果时检查停止请求的间隔（秒）

    def __init__(self, sequence: int, document: str, query: str, options: SearchOptions,
                 timeout: Optional[float] = None):
        super().__init__()
        self.sequence = sequence
        self.document = document
        self.query = query
        self.options = options
        self.timeout = timeout

        self.process = None
        self._stop_requested = False
        self._mutex = QMutex()

    def run(self):
        """执行搜索"""
        print(f"🔍 开始搜索 #{self.sequence}: {self.query!r} "
              f"({'正则' if self.options.use_regex else '文本'}, {len(self.document)} 字符)")
        stats = SearchStats()
        stats.document_length = len(self.document)
        start_time = time.time()

        try:
            check_query(self.query, self.options)
        except InvalidPatternError as e:
            print(f"❌ 搜索 #{self.sequence} 失败: {e}")
            self.search_failed.emit(self.sequence, str(e))
            return

        try:
            outcome = self._run_in_process(start_time)
        except Exception as e:
            print(f"❌ 搜索线程错误 #{self.sequence}: {e}")
            self.search_failed.emit(self.sequence, f"搜索引擎错误: {e}")
            return

        if outcome is None:
            self.search_cancelled.emit(self.sequence)
            return

        status, payload = outcome
        if status != "ok":
            print(f"❌ 搜索 #{self.sequence} 失败: {payload}")
            self.search_failed.emit(self.sequence, payload)
            return

        stats.search_time = time.time() - start_time
        stats.match_count = len(payload)
        stats.calculate_throughput()
        stats.sample_memory()

        print(f"✅ 搜索 #{self.sequence} 完成: {stats.summary()}")
        self.search_stats.emit(self.sequence, stats)
        self.search_completed.emit(self.sequence, payload)

    def _run_in_process(self, start_time: float):
        """
        启动搜索子进程并等待结果

        Returns:
            (状态, 内容) 元组；请求停止时返回 None
        """
        if not self.query:
            return "ok", ()

        # spawn 启动，避免在带线程的 Qt 进程里 fork
        ctx = mp.get_context("spawn")
        receiver, sender = ctx.Pipe(duplex=False)
        self.process = ctx.Process(
            target=run_search_process,
            args=(sender, self.document, self.query, self.options),
            name=f"SearchProcess-{self.sequence}",
            daemon=True
        )

        try:
            self.process.start()
            sender.close()

            while not receiver.poll(self.POLL_INTERVAL):
                if self._is_stop_requested():
                    return None
                if self.timeout is not None and time.time() - start_time > self.timeout:
                    return "timeout", f"搜索超时（超过 {self.timeout:g} 秒），请简化正则表达式"

            try:
                return receiver.recv()
            except EOFError:
                return "error", f"搜索进程异常退出 (退出码 {self.process.exitcode})"
        finally:
            receiver.close()
            self._shutdown_process()

    def _shutdown_process(self):
        """结束子进程（正常结束时只是回收）"""
        process = self.process
        if process is None:
            return
        if process.is_alive():
            process.terminate()
            process.join(1)
            if process.is_alive():
                process.kill()
        process.join()
        process.close()
        self.process = None

    def stop(self):
        """请求停止搜索"""
        with QMutexLocker(self._mutex):
            self._stop_requested = True

    def _is_stop_requested(self) -> bool:
        """检查是否请求停止"""
        with QMutexLocker(self._mutex):
            return self._stop_requested


class SearchCoordinator(QObject):
    """
    搜索协调器 - 为每次搜索分配递增序号，只应用最新一次搜索的结果

    结果通过信号回到协调器所在的界面线程，之后才创建导航器；
    被取代的搜索结果直接丢弃。
    """

    search_started = pyqtSignal(int)        # 序号
    results_ready = pyqtSignal(object, str) # (MatchNavigator, 搜索时的文档快照)
    search_error = pyqtSignal(str)          # 错误信息
    search_cancelled = pyqtSignal(int)      # 序号
    stats_ready = pyqtSignal(object)        # SearchStats

    def __init__(self, timeout: Optional[float] = None):
        super().__init__()
        self.timeout = timeout
        self._sequence = 0
        self._workers: Dict[int, SearchWorker] = {}

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    def is_latest(self, sequence: int) -> bool:
        return sequence == self._sequence

    def is_searching(self) -> bool:
        worker = self._workers.get(self._sequence)
        return worker is not None and worker.isRunning()

    def start_search(self, document: str, query: str,
                     options: Optional[SearchOptions] = None) -> int:
        """
        提交一次后台搜索

        Args:
            document: 搜索开始时的文档快照
            query: 搜索内容
            options: 搜索选项

        Returns:
            本次搜索的序号
        """
        self._sequence += 1
        sequence = self._sequence

        # 之前的搜索已过时，请求它们尽快结束
        for worker in self._workers.values():
            worker.stop()

        worker = SearchWorker(sequence, document, query, options or SearchOptions(), self.timeout)
        worker.search_completed.connect(self._on_search_completed)
        worker.search_failed.connect(self._on_search_failed)
        worker.search_cancelled.connect(self._on_search_cancelled)
        worker.search_stats.connect(self._on_search_stats)
        worker.finished.connect(self._on_worker_finished)
        self._workers[sequence] = worker

        self.search_started.emit(sequence)
        worker.start()
        return sequence

    def stop_all(self, timeout_ms: int = 3000):
        """停止所有搜索（窗口关闭时调用），子进程随之结束"""
        # 线程对象由 finished 信号统一清理
        for sequence, worker in list(self._workers.items()):
            worker.stop()
            if worker.isRunning() and not worker.wait(timeout_ms):
                print(f"搜索线程 #{sequence} 未能及时停止")

    def _on_search_completed(self, sequence: int, matches):
        if not self.is_latest(sequence):
            print(f"⏭️ 丢弃过时的搜索结果 #{sequence}（最新 #{self._sequence}）")
            return
        worker = self._workers.get(sequence)
        document = worker.document if worker is not None else ""
        self.results_ready.emit(MatchNavigator(matches), document)

    def _on_search_failed(self, sequence: int, message: str):
        if not self.is_latest(sequence):
            return
        self.search_error.emit(message)

    def _on_search_cancelled(self, sequence: int):
        if self.is_latest(sequence):
            print(f"🛑 搜索 #{sequence} 已停止")
        else:
            print(f"🛑 搜索 #{sequence} 已被 #{self._sequence} 取代并停止")
        self.search_cancelled.emit(sequence)

    def _on_search_stats(self, sequence: int, stats: SearchStats):
        if self.is_latest(sequence):
            self.stats_ready.emit(stats)

    def _on_worker_finished(self):
        worker = self.sender()
        if isinstance(worker, SearchWorker):
            self._workers.pop(worker.sequence, None)
            worker.deleteLater()
