#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
查找引擎与匹配导航器使用示例
展示界面之外如何直接调用查找和导航
"""

from logic.search_engine import find, InvalidPatternError
from logic.search_manager import MatchNavigator

def example_basic_usage():
    """基本使用示例"""
    print("🔍 基本使用示例")
    print("-" * 40)

    sample_text = """
2024-01-01 10:00:00 INFO 应用程序启动
2024-01-01 10:00:03 ERROR 数据库连接失败
2024-01-01 10:00:05 ERROR 连接超时
2024-01-01 10:00:09 SUCCESS 数据库连接成功
""".strip()

    navigator = MatchNavigator(find(sample_text, r"\d{2}:\d{2}:\d{2} ERROR", True))
    print(f"匹配数: {navigator.count()}")

    # 下一个在最后一个之后回到第一个
    for _ in range(navigator.count() + 1):
        match = navigator.current()
        print(f"  [{navigator.position_label()}] 偏移 {match.offset}: {match.text}")
        navigator.next()

    try:
        find(sample_text, "(ERROR", True)
    except InvalidPatternError as e:
        print(f"\n❌ {e}")

def main():
    """主函数"""
    print("🔬 查找引擎使用示例")
    print("=" * 60)
    example_basic_usage()
    print("=" * 60)

if __name__ == "__main__":
    main()
