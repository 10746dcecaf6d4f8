#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey Service Provider base class.

Concrete device backends subclass a service provider, set an ``identifier`` and
are instantiated from a ``type=<identifier>;key=value`` configuration string.
"""

import abc
import inspect
import logging
from typing import Iterator, Optional, Type, Union

from typing_extensions import Self

from hwkey.exceptions import HWKeyError, HWKeyKeyError, HWKeyValueError
from hwkey.utils.plugins import PluginsManager

logger = logging.getLogger(__name__)


class ServiceProvider(abc.ABC):
    """Service Provider abstract base class.

    :cvar reserved_keys: List of parameter keys reserved by the framework.
    """

    identifier: str
    plugin_identifier: str
    reserved_keys = ["type"]

    def __init_subclass__(cls) -> None:
        """Check that concrete subclasses have an identifier.

        :raises HWKeyError: When concrete subclass doesn't have 'identifier' attribute set.
        """
        if not inspect.isabstract(cls) and not hasattr(cls, "identifier"):
            raise HWKeyError(f"{cls.__name__}.identifier is not set")
        return super().__init_subclass__()

    def info(self) -> str:
        """Provide information about the Service provider.

        :return: Name of the service provider class.
        """
        return self.__class__.__name__

    @classmethod
    def get_types(cls, include_abstract: bool = False) -> list[str]:
        """Get identifiers of all available providers.

        :param include_abstract: Whether to include abstract provider types in the result.
        :return: List of provider type identifiers.
        """
        return [
            sub_class.identifier
            for sub_class in cls.get_all_providers(include_abstract=include_abstract)
        ]

    @classmethod
    def filter_params(cls, klass: Type[Self], params: dict[str, str]) -> dict[str, str]:
        """Remove reserved keys the class constructor doesn't accept.

        :param klass: Service provider class to check constructor parameters against.
        :param params: Dictionary of string parameters to filter.
        :return: Filtered dictionary.
        """
        unused_params = set(params) - set(klass.__init__.__code__.co_varnames)
        for key in cls.reserved_keys:
            if key in unused_params:
                del params[key]
        return params

    @staticmethod
    def convert_params(params: str) -> dict[str, str]:
        """Convert creation params from string into dictionary.

        :param params: Semicolon-separated key-value pairs, e.g. "type=emulator;seed=abc".
        :raises HWKeyKeyError: Duplicate key found in the parameters.
        :raises HWKeyValueError: Parameter format is invalid.
        :return: Dictionary containing the parsed key-value pairs.
        """
        result: dict[str, str] = {}
        try:
            for p in params.split(";"):
                key, value = p.split("=")
                if key in result:
                    raise HWKeyKeyError(f"Duplicate key found: {key}")
                result[key] = value
        except ValueError as e:
            raise HWKeyValueError(
                "Parameter must meet the following pattern: type=emulator;seed=some_seed"
            ) from e
        return result

    @classmethod
    def create(cls, params: Union[str, dict]) -> Optional[Self]:
        """Create a concrete instance of service provider.

        Plugins are loaded first so backends installed as separate distributions
        are found as well.

        :param params: Configuration string or dictionary with the 'type' key.
        :raises HWKeyValueError: The 'type' key is missing.
        :return: Instance of the matching provider class, or None if not found.
        """
        cls.load_plugins()
        if isinstance(params, str):
            params = cls.convert_params(params)
        if "type" not in params:
            raise HWKeyValueError("Provider configuration must contain the 'type' key")
        for klass in cls.get_all_providers():
            if klass.identifier == params["type"]:
                klass.filter_params(klass, params)
                return klass(**params)

        logger.info(f"{cls.__name__} of type {params['type']} was not found.")
        return None

    @classmethod
    def load_plugins(cls) -> None:
        """Load all plugins implementing this service."""
        if hasattr(cls, "plugin_identifier"):
            logger.info(f"Loading plugins: {cls.plugin_identifier}")
            manager = PluginsManager()
            manager.load_from_entrypoints(cls.plugin_identifier)

    @classmethod
    def get_all_providers(cls, include_abstract: bool = False) -> list[Type[Self]]:
        """Get list of all available providers.

        :param include_abstract: Whether to include abstract classes in the result.
        :return: List of provider classes found in the inheritance hierarchy.
        """

        def get_subclasses(base_class: Type[Self]) -> Iterator[Type[Self]]:
            for subclass in base_class.__subclasses__():
                yield subclass
                yield from get_subclasses(subclass)

        if include_abstract:
            return list(get_subclasses(cls))
        return list(filter(lambda x: not inspect.isabstract(x), get_subclasses(cls)))
