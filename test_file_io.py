#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
文件读写测试
"""

import pytest

from logic.file_io import FileHandler, FileOperationError


def test_save_then_load(tmp_path):
    handler = FileHandler(encoding="utf-8")
    path = tmp_path / "note.txt"

    handler.save_file(str(path), "第一行\nsecond line\n")
    assert handler.load_file(str(path)) == "第一行\nsecond line\n"


def test_save_overwrites(tmp_path):
    handler = FileHandler(encoding="utf-8")
    path = tmp_path / "note.txt"
    path.write_text("old content that is longer", encoding="utf-8")

    handler.save_file(str(path), "new")
    assert path.read_text(encoding="utf-8") == "new"


def test_load_missing_file(tmp_path):
    handler = FileHandler()
    missing = tmp_path / "missing.txt"

    with pytest.raises(FileOperationError) as exc_info:
        handler.load_file(str(missing))
    assert exc_info.value.path == str(missing)


def test_load_undecodable_file(tmp_path):
    handler = FileHandler(encoding="utf-8")
    path = tmp_path / "binary.bin"
    path.write_bytes(b"\xff\xfe\xfa")

    with pytest.raises(FileOperationError):
        handler.load_file(str(path))


def test_save_into_missing_directory(tmp_path):
    handler = FileHandler()
    target = tmp_path / "no" / "such" / "dir" / "file.txt"

    with pytest.raises(FileOperationError) as exc_info:
        handler.save_file(str(target), "text")
    assert exc_info.value.reason
