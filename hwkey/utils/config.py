#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey configuration file support."""

from typing import Optional

from typing_extensions import Self

from hwkey.exceptions import HWKeyError
from hwkey.utils.misc import load_configuration


class Config(dict):
    """HWKey configuration loaded from a YAML or JSON file."""

    @classmethod
    def create_from_file(cls, file_path: str) -> Self:
        """Create configuration object from file.

        :param file_path: Path to the configuration file to load.
        :return: Configuration object.
        """
        return cls(load_configuration(file_path))

    def get_str(self, key: str, default: Optional[str] = None) -> str:
        """Get the key value as string.

        :param key: Key name of the configuration entry.
        :param default: Default value to return if the key doesn't exist in configuration.
        :raises HWKeyError: If the retrieved value is not a string type.
        :return: Configuration value as string.
        """
        ret = self.get(key, default)
        if not isinstance(ret, str):
            raise HWKeyError(f"The value is not string at key: {key}")
        return ret

    def get_bool(self, key: str, default: Optional[bool] = None) -> bool:
        """Get the key value as boolean.

        :param key: Key name of the configuration entry.
        :param default: Default value if configuration doesn't contain the key.
        :raises HWKeyError: If the retrieved value is not a boolean type.
        :return: Boolean value from configuration.
        """
        ret = self.get(key, default)
        if not isinstance(ret, bool):
            raise HWKeyError(f"The value is not boolean at key: {key}")
        return ret
