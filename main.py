#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import sys
import os
import traceback

# 添加项目根目录到Python路径
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

# PyQt5导入
from PyQt5.QtWidgets import QApplication, QMessageBox
from PyQt5.QtCore import Qt

def setup_application(argv=None):
    """设置应用程序"""
    # 设置高DPI支持（PyQt5）
    if hasattr(Qt, 'AA_EnableHighDpiScaling'):
        QApplication.setAttribute(Qt.AA_EnableHighDpiScaling, True)
    if hasattr(Qt, 'AA_UseHighDpiPixmaps'):
        QApplication.setAttribute(Qt.AA_UseHighDpiPixmaps, True)

    # 创建应用程序实例
    app = QApplication.instance() or QApplication(argv if argv is not None else sys.argv)

    # 设置应用程序属性
    app.setApplicationName("TextEdit - 文本编辑器")
    app.setApplicationVersion("1.0")
    app.setOrganizationName("LSBT")

    return app

def handle_exception(exc_type, exc_value, exc_tb):
    """未捕获异常 - 打印并尽量弹窗提示，不让进程静默退出"""
    print(f"\n未捕获的异常: {exc_type.__name__}: {exc_value}")
    traceback.print_exception(exc_type, exc_value, exc_tb)

    app = QApplication.instance()
    if app:
        QMessageBox.critical(None, "程序错误", f"程序遇到未处理的错误:\n{exc_type.__name__}: {exc_value}")

def main():
    """主函数"""
    print("=" * 50)
    print("TextEdit - 文本编辑器启动中...")
    print("=" * 50)

    sys.excepthook = handle_exception
    app = setup_application()

    from ui.main_window import MainWindow

    try:
        window = MainWindow()
    except Exception as e:
        print(f"✗ 主窗口创建失败: {e}")
        traceback.print_exc()
        QMessageBox.critical(None, "窗口创建错误", f"创建主窗口失败:\n{str(e)}")
        return 1

    # 命令行参数中的文件直接打开
    if len(sys.argv) > 1:
        window.load_file(sys.argv[1])

    window.show()
    print("✓ 主窗口显示成功")

    exit_code = app.exec_()
    print(f"\n应用程序退出，退出码: {exit_code}")
    return exit_code

def run():
    """控制台脚本入口"""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n程序被用户中断")
        sys.exit(0)

if __name__ == '__main__':
    run()
