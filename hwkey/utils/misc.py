#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey miscellaneous utilities and helper functions.

This module provides small helpers used throughout the HWKey library: byte
order enumeration, file loading and storing and configuration file parsing.
"""

import json
import logging
import os
from enum import Enum
from typing import Any, Optional, Type, TypeVar, Union

import yaml

from hwkey.exceptions import HWKeyError

logger = logging.getLogger(__name__)


class Endianness(str, Enum):
    """Byte order of the integers exchanged with devices and stored in files."""

    BIG = "big"


def find_file(file_path: str) -> str:
    """Resolve path of an existing file, relative paths are taken from cwd.

    :param file_path: Absolute or relative file path.
    :raises HWKeyError: File not found.
    :return: Absolute path to the file.
    """
    full_path = os.path.abspath(file_path.replace("\\", "/"))
    if not os.path.isfile(full_path):
        raise HWKeyError(f"File '{file_path}' not found")
    return full_path.replace("\\", "/")


def load_file(path: str, mode: str = "r") -> Union[str, bytes]:
    """Load file content from specified path.

    :param path: Path to the file to be loaded.
    :param mode: File reading mode, 'r' for text or 'rb' for binary.
    :return: File content as string (text mode) or bytes (binary mode).
    """
    path = find_file(path)
    logger.debug(f"Loading {'binary' if 'b' in mode else 'text'} file from {path}")
    encoding = None if "b" in mode else "utf-8"
    with open(path, mode, encoding=encoding) as f:
        return f.read()


def load_binary(path: str) -> bytes:
    """Load binary file into bytes.

    :param path: Path to the binary file to load.
    :return: Content of the binary file as bytes.
    """
    data = load_file(path, mode="rb")
    assert isinstance(data, bytes)
    return data


def load_text(path: str) -> str:
    """Load text file content into string.

    :param path: Path to the text file to load.
    :return: Content of the text file as string.
    """
    text = load_file(path, mode="r")
    assert isinstance(text, str)
    return text


def write_file(data: Union[str, bytes], path: str, mode: str = "w") -> int:
    """Write data into a file.

    Missing parent directories are created.

    :param data: Data to write.
    :param path: Path to the file.
    :param mode: Writing mode, 'w' for text, 'wb' for binary data.
    :return: Number of written elements.
    """
    path = path.replace("\\", "/")
    folder = os.path.dirname(path)
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)

    logger.debug(f"Storing {'binary' if 'b' in mode else 'text'} file at {path}")
    encoding = None if "b" in mode else "utf-8"
    with open(path, mode, encoding=encoding) as f:
        return f.write(data)


def load_configuration(path: str) -> dict:
    """Load configuration from YAML or JSON file.

    The method attempts to parse the file content as JSON first, then falls back
    to YAML parsing.

    :param path: Path to configuration file (relative or absolute).
    :raises HWKeyError: When file cannot be loaded, parsed, or contains invalid format.
    :return: Content of configuration as dictionary.
    """
    try:
        config = load_text(path)
    except Exception as exc:
        raise HWKeyError(f"Can't load configuration file: {str(exc)}") from exc

    config_data: Optional[dict] = None
    try:
        config_data = json.loads(config)
    except json.JSONDecodeError:
        try:
            config_data = yaml.safe_load(config)
        except (yaml.YAMLError, UnicodeDecodeError):
            pass

    if not config_data:
        raise HWKeyError(f"Can't parse configuration file: {path}")
    if not isinstance(config_data, dict):
        raise HWKeyError(f"Invalid configuration file: {path}")

    return config_data


TS = TypeVar("TS", bound="SingletonMeta")  # pylint: disable=invalid-name


class SingletonMeta(type):
    """Singleton metaclass for ensuring single instance creation.

    :cvar _instance: Stores the single instance of the class.
    """

    _instance = None

    def __call__(cls: Type[TS], *args: Any, **kwargs: Any) -> TS:  # type: ignore
        """Create or return singleton instance of the class.

        :param cls: The class type to instantiate.
        :param args: Positional arguments to pass to the class constructor.
        :param kwargs: Keyword arguments to pass to the class constructor.
        :return: The singleton instance of the class.
        """
        if cls._instance is None:
            instance = super().__call__(*args, **kwargs)
            cls._instance = instance
        return cls._instance
