#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""SECP256K1 private key held by a signing device.

The key object never sees the secret. It keeps the derivation path and the
public key reported by the device when the key was created; every signature is
produced by the device itself.
"""

import logging
from typing import Any, Iterable, Optional, Union

from typing_extensions import Self

from hwkey import HWKEY_ADDRESS_PREFIX
from hwkey.crypto.exceptions import HWKeyKeysNotMatchingError
from hwkey.crypto.keys import COMPRESSED_KEY_LENGTH, PublicKeySecp256k1, convert_der_to_raw
from hwkey.exceptions import (
    HWKeyConfigurationError,
    HWKeyConnectionError,
    HWKeyDiscoveryError,
    HWKeyParsingError,
    HWKeyRejectedError,
)
from hwkey.ledger.device import DerivationPath, LedgerSecp256k1Device
from hwkey.ledger.discovery import DeviceDiscovery
from hwkey.ledger.operator import (
    ConsoleOperator,
    OperatorConsole,
    is_confirmation_required,
    is_confirmed,
)
from hwkey.utils.abstract import BaseClass

logger = logging.getLogger(__name__)

PathType = Union[DerivationPath, str, Iterable[int]]


class HardwareKeySecp256k1(BaseClass):
    """Private key stored on a Ledger-class device.

    A key owns its device for its whole lifetime. Signing calls must not run
    concurrently on the same key.
    """

    def __init__(
        self,
        path: PathType,
        public_key: PublicKeySecp256k1,
        device: Optional[LedgerSecp256k1Device] = None,
        operator: Optional[OperatorConsole] = None,
        address_prefix: Optional[str] = None,
        low_s: bool = False,
    ) -> None:
        """Initialize the key from already known values.

        Use :meth:`create` to create a key from a device, or :meth:`load` to
        restore an exported one.

        :param path: Derivation path of the key.
        :param public_key: Public key reported by the device for the path.
        :param device: Connected device, None for a detached key.
        :param operator: Operator console, defaults to the terminal.
        :param address_prefix: Bech32 account address prefix, defaults to HWKEY_ADDRESS_PREFIX.
        :param low_s: Normalize S of produced signatures into the lower half of the curve order.
        """
        self._path = DerivationPath.parse(path)
        self._public_key = public_key
        self.device = device
        self.operator = operator or ConsoleOperator()
        self.address_prefix = address_prefix or HWKEY_ADDRESS_PREFIX
        self.low_s = low_s

    @classmethod
    def create(
        cls,
        path: PathType,
        discover: Optional[DeviceDiscovery],
        operator: Optional[OperatorConsole] = None,
        address_prefix: Optional[str] = None,
        low_s: bool = False,
    ) -> Self:
        """Create key for the path on a discovered device.

        The discovery function is called exactly once, the public key for the path
        is then fetched from the device and cached.

        :param path: Derivation path of the key.
        :param discover: Discovery function returning a connected device.
        :param operator: Operator console, defaults to the terminal.
        :param address_prefix: Bech32 account address prefix.
        :param low_s: Normalize S of produced signatures.
        :raises HWKeyConfigurationError: No discovery function defined.
        :raises HWKeyDiscoveryError: The discovery failed.
        :raises HWKeyConnectionError: The public key can't be retrieved.
        :raises HWKeyParsingError: The device returned an invalid public key.
        :return: Hardware key.
        """
        path = DerivationPath.parse(path)
        device = cls._discover(discover)
        public_key = cls._derive_public_key(device, path)
        logger.info(f"Created hardware key {path}")
        return cls(
            path=path,
            public_key=public_key,
            device=device,
            operator=operator,
            address_prefix=address_prefix,
            low_s=low_s,
        )

    @staticmethod
    def _discover(discover: Optional[DeviceDiscovery]) -> LedgerSecp256k1Device:
        if discover is None:
            raise HWKeyConfigurationError("no Ledger discovery function defined")
        try:
            device = discover()
        except Exception as exc:
            raise HWKeyDiscoveryError(f"failed to create hardware key: {exc}") from exc
        if device is None:
            raise HWKeyDiscoveryError("failed to create hardware key: no device found")
        return device

    @staticmethod
    def _derive_public_key(
        device: LedgerSecp256k1Device, path: DerivationPath
    ) -> PublicKeySecp256k1:
        """Fetch public key for the path and normalize it into the compressed form.

        :param device: Connected device.
        :param path: Derivation path.
        :raises HWKeyConnectionError: The device failed to provide the key.
        :raises HWKeyParsingError: The device returned an invalid point.
        :return: Public key.
        """
        logger.debug(f"Fetching public key {path} from device")
        try:
            data = device.get_public_key_secp256k1(path)
        except Exception as exc:
            raise HWKeyConnectionError(
                "please open the Cosmos app on the Ledger device - "
                f"error: error fetching public key: {exc}"
            ) from exc
        try:
            return PublicKeySecp256k1.parse(bytes(data))
        except HWKeyParsingError as exc:
            raise HWKeyParsingError(f"error parsing public key: {exc.description}") from exc

    @property
    def path(self) -> DerivationPath:
        """Derivation path of the key."""
        return self._path

    @property
    def public_key(self) -> PublicKeySecp256k1:
        """Public key cached when the key was created."""
        return self._public_key

    @property
    def is_attached(self) -> bool:
        """Whether the key is connected to a device."""
        return self.device is not None

    def _get_device(self) -> LedgerSecp256k1Device:
        if self.device is None:
            raise HWKeyConfigurationError(
                f"Hardware key {self.path} is not attached to any device"
            )
        return self.device

    def derive_public_key(self) -> PublicKeySecp256k1:
        """Fetch the public key from the attached device, the cache is not touched.

        :return: Compressed public key reported by the device.
        """
        return self._derive_public_key(self._get_device(), self.path)

    def attach(self, discover: Optional[DeviceDiscovery]) -> None:
        """Attach a discovered device to the key.

        :param discover: Discovery function returning a connected device.
        """
        self.device = self._discover(discover)

    def validate(self) -> None:
        """Check the attached device still provides the cached public key.

        :raises HWKeyKeysNotMatchingError: The device reports a different key.
        """
        current = self.derive_public_key()
        if current.export() != self.public_key.export():
            raise HWKeyKeysNotMatchingError("cached key does not match retrieved key")
        logger.debug(f"Hardware key {self.path} validated")

    def address(self, prefix: Optional[str] = None) -> str:
        """Get bech32 account address of the key.

        :param prefix: Address prefix, defaults to the key address prefix.
        :return: Account address.
        """
        return self.public_key.address(prefix or self.address_prefix)

    def sign(self, message: bytes) -> bytes:
        """Sign the message on the device.

        When the device application is 1.1 or newer, the device shows the account
        address and the operator must confirm it matches. The operator then checks
        the transaction on the device screen.

        :param message: Message to be signed.
        :raises HWKeyRejectedError: The operator did not confirm the address.
        :return: Signature, 32 bytes of R followed by 32 bytes of S.
        """
        device = self._get_device()
        version = device.get_version()
        logger.debug(f"Device application version {version}")
        if is_confirmation_required(version):
            self.operator.write(
                "Please confirm if address displayed on ledger is identical to "
                f"{self.address()} (yes/no)?",
                newline=False,
            )
            device.show_address_secp256k1(self.path, self.address_prefix)
            if not is_confirmed(self.operator.read_line()):
                logger.warning(f"Operator rejected address of hardware key {self.path}")
                raise HWKeyRejectedError("ledger account doesn't match")
        self.operator.write("Please verify the transaction data on ledger")

        logger.debug(f"Signing {len(message)} bytes with hardware key {self.path}")
        signature = device.sign_secp256k1(self.path, message)
        return convert_der_to_raw(bytes(signature), low_s=self.low_s)

    def export(self) -> bytes:
        """Export the cached public key and the path, the device is not stored.

        :return: Compressed public key followed by the binary path.
        """
        return self.public_key.export() + self.path.export()

    @classmethod
    def parse(cls, data: bytes) -> Self:
        """Parse exported key. The key is detached, use :meth:`attach` or :meth:`load`.

        :param data: Exported key.
        :raises HWKeyParsingError: Invalid data.
        :return: Detached hardware key.
        """
        if len(data) <= COMPRESSED_KEY_LENGTH:
            raise HWKeyParsingError(f"Invalid hardware key data length {len(data)}")
        public_key = PublicKeySecp256k1.parse(data[:COMPRESSED_KEY_LENGTH])
        path = DerivationPath.from_bytes(data[COMPRESSED_KEY_LENGTH:])
        return cls(path=path, public_key=public_key)

    @classmethod
    def load(
        cls,
        data: bytes,
        discover: Optional[DeviceDiscovery],
        operator: Optional[OperatorConsole] = None,
        address_prefix: Optional[str] = None,
    ) -> Self:
        """Restore exported key, attach a device and validate it.

        :param data: Exported key.
        :param discover: Discovery function returning a connected device.
        :param operator: Operator console, defaults to the terminal.
        :param address_prefix: Bech32 account address prefix.
        :return: Validated hardware key.
        """
        key = cls.parse(data)
        key.operator = operator or key.operator
        key.address_prefix = address_prefix or key.address_prefix
        key.attach(discover)
        key.validate()
        return key

    def __eq__(self, obj: Any) -> bool:
        return isinstance(obj, HardwareKeySecp256k1) and self.public_key == obj.public_key

    def __hash__(self) -> int:
        return hash(self.public_key)

    def __repr__(self) -> str:
        return f"HardwareKeySecp256k1({self.path})"

    def __str__(self) -> str:
        return (
            f"Hardware key {self.path}\n"
            f"Public key: {self.public_key.export().hex()}\n"
            f"Address: {self.address()}"
        )
