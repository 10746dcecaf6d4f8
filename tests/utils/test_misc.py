#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests of miscellaneous utilities."""

import os

import pytest

from hwkey import value_to_bool
from hwkey.exceptions import HWKeyError
from hwkey.utils.misc import find_file, load_binary, load_configuration, load_text, write_file


def test_write_and_load(tmpdir: str) -> None:
    binary_path = os.path.join(tmpdir, "nested", "data.bin")
    assert write_file(b"\x00\x01\x02", binary_path, mode="wb") == 3
    assert load_binary(binary_path) == b"\x00\x01\x02"
    text_path = os.path.join(tmpdir, "data.txt")
    write_file("hello", text_path)
    assert load_text(text_path) == "hello"


def test_find_file(tmpdir: str, monkeypatch: pytest.MonkeyPatch) -> None:
    path = os.path.join(tmpdir, "file.txt")
    write_file("x", path)
    monkeypatch.chdir(tmpdir)
    assert os.path.samefile(find_file("file.txt"), path)
    assert find_file(path) == path.replace("\\", "/")
    with pytest.raises(HWKeyError):
        find_file("missing.txt")
    with pytest.raises(HWKeyError):
        find_file(os.path.join(tmpdir, "missing.txt"))


def test_load_configuration(tmpdir: str) -> None:
    path = os.path.join(tmpdir, "cfg.yaml")
    write_file("key: value\n", path)
    assert load_configuration(path) == {"key": "value"}
    write_file("", path)
    with pytest.raises(HWKeyError):
        load_configuration(path)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("True", True),
        ("1", True),
        ("T", True),
        ("false", False),
        ("", False),
        (None, False),
        (1, True),
    ],
)
def test_value_to_bool(value, expected: bool) -> None:
    assert value_to_bool(value) is expected
