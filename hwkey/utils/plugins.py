#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey plugins manager.

Device backends (the USB/HID transports talking to a real device) live outside
of this library. They are announced through setuptools entry points or loaded
directly from a Python source file. Importing the module is enough, the
backend class registers itself by subclassing the device service provider.
"""

import logging
import os
import sys
from importlib.util import module_from_spec, spec_from_file_location
from types import ModuleType
from typing import Optional

import importlib_metadata

from hwkey.exceptions import HWKeyError, HWKeyTypeError
from hwkey.utils.hwkey_enum import HWKeyEnum
from hwkey.utils.misc import SingletonMeta

logger = logging.getLogger(__name__)


class PluginType(HWKeyEnum):
    """Entry point groups scanned for plugins."""

    DEVICE = (0, "hwkey.device", "Signing device backend")


class PluginsManager(metaclass=SingletonMeta):
    """Registry of the imported plugin modules, keyed by module name."""

    def __init__(self) -> None:
        self.plugins: dict[str, ModuleType] = {}

    def load_from_entrypoints(self, group_name: Optional[str] = None) -> int:
        """Import plugins announced in an entry point group.

        Plugins failing to import are skipped with a warning.

        :param group_name: Entry point group, all groups of :class:`PluginType` when None.
        :raises HWKeyTypeError: Group name is not a string.
        :return: Number of newly registered plugins.
        """
        if group_name is not None and not isinstance(group_name, str):
            raise HWKeyTypeError("Group name must be of string type.")
        groups = [group_name] if group_name is not None else PluginType.labels()

        count = 0
        for group in groups:
            for entry_point in importlib_metadata.entry_points(group=group):
                try:
                    plugin = entry_point.load()
                except ImportError as exc:
                    logger.warning(f"Plugin {entry_point.name} could not be loaded: {exc}")
                    continue
                if self.register(plugin):
                    logger.info(f"Plugin {entry_point.name} from {group} has been loaded.")
                    count += 1
        return count

    def load_from_source_file(self, source_file: str, module_name: Optional[str] = None) -> None:
        """Import a plugin from a Python source file.

        :param source_file: Path to the source file, absolute or relative to cwd.
        :param module_name: Name of the new module, the file base name by default.
        :raises HWKeyError: The file can't be imported.
        """
        name = module_name or os.path.splitext(os.path.basename(source_file))[0]
        spec = spec_from_file_location(name=name, location=source_file)
        if not spec or not spec.loader:
            raise HWKeyError(f"Source '{source_file}' is not a valid Python file")
        module = module_from_spec(spec)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            del sys.modules[name]
            raise HWKeyError(f"Failed to load plugin {source_file}: {exc}") from exc
        logger.debug(f"Plugin source {source_file} has been imported as {name}.")
        self.register(module)

    def register(self, plugin: ModuleType) -> bool:
        """Register an imported plugin module.

        :param plugin: Plugin module.
        :return: False when a module of the same name is already registered.
        """
        if plugin.__name__ in self.plugins:
            logger.debug(f"Plugin {plugin.__name__} has been already registered.")
            return False
        self.plugins[plugin.__name__] = plugin
        return True
