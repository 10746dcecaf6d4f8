#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Signing device capability.

The hardware key only needs four operations from a device. Any object
providing them can be used; backends registered in the plugin system derive
from :class:`LedgerSecp256k1Device` so they can be created from a
configuration string.
"""

import abc
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Union

from typing_extensions import Self

from hwkey.exceptions import HWKeyParsingError, HWKeyValueError
from hwkey.utils.misc import Endianness
from hwkey.utils.plugins import PluginType
from hwkey.utils.service_provider import ServiceProvider

logger = logging.getLogger(__name__)

HARDENED_BIT = 0x80000000
MAX_PATH_DEPTH = 255


class DerivationPath(tuple):
    """Derivation path, an ordered sequence of unsigned 32-bit indices.

    The path is opaque to the hardware key and passed verbatim to the device.
    """

    def __new__(cls, indices: Iterable[int] = ()) -> Self:
        """Create derivation path.

        :param indices: Path elements.
        :raises HWKeyValueError: An element doesn't fit into 32 bits or the path is too long.
        """
        items = tuple(indices)
        for index in items:
            if isinstance(index, bool) or not isinstance(index, int):
                raise HWKeyValueError(f"Invalid derivation path element: {index!r}")
            if not 0 <= index <= 0xFFFFFFFF:
                raise HWKeyValueError(f"Derivation path element out of range: {index}")
        if len(items) > MAX_PATH_DEPTH:
            raise HWKeyValueError(f"Derivation path is longer than {MAX_PATH_DEPTH} elements")
        return super().__new__(cls, items)

    def __str__(self) -> str:
        elements = ["m"]
        for index in self:
            if index & HARDENED_BIT:
                elements.append(f"{index & ~HARDENED_BIT}'")
            else:
                elements.append(str(index))
        return "/".join(elements)

    def __repr__(self) -> str:
        return f"DerivationPath({list(self)})"

    @classmethod
    def parse(cls, path: Union[str, Iterable[int]]) -> Self:
        """Parse derivation path.

        Accepted are comma separated indices (``44,118,0,0,0``) and BIP32 text
        (``m/44'/118'/0'/0/0``) where the ``'`` or ``h`` suffix sets the
        hardened bit.

        :param path: Path text or sequence of indices.
        :raises HWKeyValueError: Invalid path.
        :return: Derivation path.
        """
        if isinstance(path, DerivationPath):
            return cls(path)
        if not isinstance(path, str):
            return cls(path)
        text = path.strip()
        if not text or text == "m":
            return cls()
        separator = "/" if "/" in text or text.startswith("m") else ","
        elements = text.split(separator)
        if elements[0] == "m":
            elements = elements[1:]
        indices = []
        for element in elements:
            match = re.fullmatch(r"\s*(\d+)\s*(['hH]?)\s*", element)
            if not match:
                raise HWKeyValueError(f"Invalid derivation path element '{element}' in '{path}'")
            index = int(match.group(1))
            if match.group(2):
                if index >= HARDENED_BIT:
                    raise HWKeyValueError(f"Hardened index out of range: {index}")
                index |= HARDENED_BIT
            indices.append(index)
        return cls(indices)

    def export(self) -> bytes:
        """Export path as one byte count followed by big-endian uint32 elements.

        :return: Binary path.
        """
        data = len(self).to_bytes(1, Endianness.BIG.value)
        for index in self:
            data += index.to_bytes(4, Endianness.BIG.value)
        return data

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """Parse path stored by :meth:`export`.

        :param data: Binary path, must not contain any trailing data.
        :raises HWKeyParsingError: Invalid length.
        :return: Derivation path.
        """
        if not data:
            raise HWKeyParsingError("Missing derivation path length")
        count = data[0]
        if len(data) != 1 + 4 * count:
            raise HWKeyParsingError(
                f"Invalid derivation path data length {len(data)}, expected {1 + 4 * count}"
            )
        return cls(
            int.from_bytes(data[1 + 4 * i : 5 + 4 * i], Endianness.BIG.value) for i in range(count)
        )


@dataclass(frozen=True, order=True)
class VersionInfo:
    """Version of the application running on the device.

    Ordering uses major, minor and patch, the application mode is informational.
    """

    major: int
    minor: int
    patch: int = 0
    app_mode: int = field(default=0, compare=False)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, version: str) -> Self:
        """Parse version text ``major.minor[.patch]``.

        :param version: Version text.
        :raises HWKeyValueError: Invalid version text.
        :return: Version info.
        """
        match = re.fullmatch(r"\s*(\d+)\.(\d+)(?:\.(\d+))?\s*", version)
        if not match:
            raise HWKeyValueError(f"Invalid version '{version}'")
        return cls(int(match.group(1)), int(match.group(2)), int(match.group(3) or 0))


class LedgerSecp256k1Device(ServiceProvider):
    """Signing device holding SECP256K1 keys.

    Implementations talk to the device; they may block for as long as the
    device or its transport does.
    """

    plugin_identifier = PluginType.DEVICE.label

    @abc.abstractmethod
    def get_public_key_secp256k1(self, path: DerivationPath) -> bytes:
        """Get the public key for given path.

        :param path: Derivation path.
        :return: Public key in any form the device uses (compressed or uncompressed point).
        """

    @abc.abstractmethod
    def show_address_secp256k1(self, path: DerivationPath, hrp: str) -> None:
        """Display the account address for given path on the device screen.

        :param path: Derivation path.
        :param hrp: Human readable address prefix.
        """

    @abc.abstractmethod
    def sign_secp256k1(self, path: DerivationPath, message: bytes) -> bytes:
        """Sign the message with the key for given path.

        :param path: Derivation path.
        :param message: Message to be signed, the device hashes it.
        :return: DER encoded signature.
        """

    @abc.abstractmethod
    def get_version(self) -> VersionInfo:
        """Get version of the application running on the device.

        :return: Version info.
        """

    def close(self) -> None:
        """Release the device."""

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
