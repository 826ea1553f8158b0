import os
import re
import time
import psutil
from typing import List
from dataclasses import dataclass
from functools import lru_cache

from dataform.search_result import Match, MatchList


class InvalidPatternError(ValueError):
    """正则表达式无法编译 - 需要上报给界面而不是吞掉"""

    def __init__(self, pattern: str, error: re.error):
        self.pattern = pattern
        self.reason = error.msg if hasattr(error, 'msg') else str(error)
        self.position = getattr(error, 'pos', None)
        detail = f"正则表达式错误: {pattern!r} - {self.reason}"
        if self.position is not None:
            detail += f" (位置 {self.position})"
        super().__init__(detail)


@dataclass
class SearchOptions:
    """搜索选项配置"""
    use_regex: bool = False
    ignore_case: bool = False
    whole_word: bool = False


class SearchStats:
    """搜索统计信息"""
    def __init__(self):
        self.document_length = 0
        self.match_count = 0
        self.search_time = 0.0
        self.throughput = 0.0  # 字符/秒
        self.memory_usage = 0.0  # MB

    def calculate_throughput(self):
        if self.search_time > 0:
            self.throughput = self.document_length / self.search_time

    def sample_memory(self):
        """记录当前进程的内存占用"""
        self.memory_usage = psutil.Process(os.getpid()).memory_info().rss / (1024 * 1024)

    def summary(self) -> str:
        return (f"{self.match_count}个匹配, 耗时{self.search_time:.3f}秒, "
                f"处理速度{self.throughput:.0f}字符/秒, 内存{self.memory_usage:.1f}MB")


@lru_cache(maxsize=128)
def compile_pattern(query: str, use_regex: bool = False,
                    ignore_case: bool = False, whole_word: bool = False) -> re.Pattern:
    """编译并缓存搜索模式"""
    pattern = query if use_regex else re.escape(query)

    if whole_word:
        pattern = r'\b(?:' + pattern + r')\b'

    flags = re.IGNORECASE if ignore_case else 0
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise InvalidPatternError(query, e) from e


def _find_literal(document: str, query: str) -> List[Match]:
    """字面量扫描 - 单一游标从左到右推进"""
    matches = []
    step = len(query)
    pos = document.find(query)

    while pos != -1:
        matches.append(Match(pos, query))
        pos = document.find(query, pos + step)

    return matches


def _find_pattern(document: str, pattern: re.Pattern) -> List[Match]:
    """
    正则扫描 - 每次从上一个匹配的结束位置继续搜索

    零宽匹配后游标额外前进一个字符，保证扫描一定结束；
    紧跟在非空匹配之后的零宽匹配不记录（该位置已被消耗）。
    """
    matches = []
    length = len(document)
    pos = 0
    last_end = -1

    while pos <= length:
        found = pattern.search(document, pos)
        if found is None:
            break

        start, end = found.span()
        if start == end:
            if start != last_end:
                matches.append(Match(start, ""))
            pos = end + 1
        else:
            matches.append(Match(start, found.group()))
            pos = end
        last_end = end

    return matches


def find(document: str, query: str, use_regex: bool = False, *,
         ignore_case: bool = False, whole_word: bool = False) -> MatchList:
    """
    在文档中查找全部互不重叠的匹配

    Args:
        document: 文档文本（调用方传入的快照）
        query: 搜索内容，空字符串永远不匹配
        use_regex: 是否把 query 当作正则表达式
        ignore_case: 忽略大小写
        whole_word: 全词匹配

    Returns:
        按文档顺序排列的匹配元组，偏移量相对于原始文档

    Raises:
        InvalidPatternError: 正则模式下 query 不是合法的正则表达式
    """
    if not query:
        return ()

    if not use_regex and not ignore_case and not whole_word:
        return tuple(_find_literal(document, query))

    pattern = compile_pattern(query, use_regex, ignore_case, whole_word)
    return tuple(_find_pattern(document, pattern))


def find_with_options(document: str, query: str, options: SearchOptions) -> MatchList:
    """按 SearchOptions 执行 find"""
    return find(document, query, options.use_regex,
                ignore_case=options.ignore_case,
                whole_word=options.whole_word)


def measure_search(document: str, query: str, options: SearchOptions) -> SearchStats:
    """执行一次搜索并返回统计信息"""
    stats = SearchStats()
    stats.document_length = len(document)

    start_time = time.time()
    matches = find_with_options(document, query, options)
    stats.search_time = time.time() - start_time

    stats.match_count = len(matches)
    stats.calculate_throughput()
    stats.sample_memory()
    return stats


def check_query(query: str, options: SearchOptions):
    """
    提前编译正则，语法错误不必启动搜索进程

    Raises:
        InvalidPatternError: 正则表达式无法编译
    """
    if query and (options.use_regex or options.ignore_case or options.whole_word):
        compile_pattern(query, options.use_regex, options.ignore_case, options.whole_word)


def run_search_process(conn, document: str, query: str, options: SearchOptions):
    """
    搜索子进程入口 - 结果通过管道发回 ("ok", matches) / ("invalid", 信息) / ("error", 信息)

    re 在一次 search 调用期间不释放 GIL，所以耗时的正则放在独立进程里执行。
    """
    try:
        matches = find_with_options(document, query, options)
    except InvalidPatternError as e:
        conn.send(("invalid", str(e)))
    except Exception as e:
        conn.send(("error", f"{type(e).__name__}: {e}"))
    else:
        conn.send(("ok", matches))
    finally:
        conn.close()
