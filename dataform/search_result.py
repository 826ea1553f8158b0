from dataclasses import dataclass
from typing import Tuple

@dataclass(frozen=True)
class Match:
    """搜索匹配项 - 文档中一次命中的位置与文本"""
    offset: int      # 在原始文档中的绝对起始位置（从0开始）
    text: str        # 实际匹配到的文本

    @property
    def end(self) -> int:
        """匹配结束位置（不含）"""
        return self.offset + len(self.text)

    def span(self) -> Tuple[int, int]:
        return self.offset, self.end


# 一次搜索产生的匹配列表，生成后不再修改
MatchList = Tuple[Match, ...]
