import os
import time
from typing import Optional


class FileOperationError(Exception):
    """文件读写失败 - 由界面捕获并提示用户"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class FileHandler:
    """文件读写 - 整个文档作为纯文本读入/写出"""

    def __init__(self, encoding: Optional[str] = None):
        self.encoding = encoding  # None 表示平台默认编码

    def load_file(self, filepath: str) -> str:
        """
        读取整个文件内容

        Raises:
            FileOperationError: 文件不存在、无权限或无法解码
        """
        start_time = time.time()
        if not os.path.isfile(filepath):
            raise FileOperationError(filepath, "文件不存在")

        try:
            with open(filepath, 'r', encoding=self.encoding) as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            print(f"❌ 读取文件失败: {e}")
            raise FileOperationError(filepath, str(e)) from e

        end_time = time.time()
        print(f"📁 读取文件 {os.path.basename(filepath)}: {len(text)} 字符, "
              f"耗时 {end_time - start_time:.3f} 秒")
        return text

    def save_file(self, filepath: str, text: str):
        """
        把整个文档写入文件（覆盖）

        Raises:
            FileOperationError: 无权限、磁盘已满或无法编码
        """
        try:
            with open(filepath, 'w', encoding=self.encoding) as f:
                f.write(text)
        except (OSError, UnicodeEncodeError) as e:
            print(f"❌ 保存文件失败: {e}")
            raise FileOperationError(filepath, str(e)) from e

        print(f"💾 已保存到: {filepath} ({len(text)} 字符)")
