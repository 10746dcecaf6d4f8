#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests of the hardware key: creation, validation, equality, signing and serialization."""

import io

import pytest

from hwkey.crypto.exceptions import HWKeyKeysNotMatchingError
from hwkey.crypto.crypto_types import HWKeyEncoding
from hwkey.crypto.keys import SECP256K1_ORDER, ECDSASignature, PublicKeySecp256k1
from hwkey.exceptions import (
    HWKeyConfigurationError,
    HWKeyConnectionError,
    HWKeyDiscoveryError,
    HWKeyError,
    HWKeyIOError,
    HWKeyParsingError,
    HWKeyRejectedError,
)
from hwkey.ledger.device import DerivationPath, VersionInfo
from hwkey.ledger.discovery import static_discovery
from hwkey.ledger.hardware_key import HardwareKeySecp256k1
from hwkey.ledger.operator import ConsoleOperator
from tests.fake_device import (
    FIXED_DER,
    G2_COMPRESSED,
    G_COMPRESSED,
    G_UNCOMPRESSED,
    R_BYTES,
    S_BYTES,
    FakeLedgerDevice,
)
from tests.fake_operator import ScriptedOperator

PATH = [44, 118, 0, 0, 0]


def create_key(device: FakeLedgerDevice, *answers: str) -> HardwareKeySecp256k1:
    return HardwareKeySecp256k1.create(
        PATH, static_discovery(device), operator=ScriptedOperator(answers)  # type: ignore[arg-type]
    )


def test_create_caches_public_key(fake_device: FakeLedgerDevice) -> None:
    """Public key is fetched once during creation and then served from the cache."""
    key = create_key(fake_device)
    assert fake_device.calls == [("get_public_key", tuple(PATH))]
    assert key.path == DerivationPath(PATH)
    assert key.public_key.export() == G_COMPRESSED
    assert key.public_key.export() == G_COMPRESSED
    assert fake_device.count("get_public_key") == 1


def test_create_without_discovery() -> None:
    """Creating a key without a discovery function is a configuration error."""
    with pytest.raises(HWKeyConfigurationError, match="no Ledger discovery function defined"):
        HardwareKeySecp256k1.create(PATH, None)


def test_discovery_called_once(fake_device: FakeLedgerDevice) -> None:
    """Discovery is invoked exactly once per key."""
    calls = []

    def discover() -> FakeLedgerDevice:
        calls.append(1)
        return fake_device

    HardwareKeySecp256k1.create(PATH, discover)  # type: ignore[arg-type]
    assert len(calls) == 1


def test_discovery_failure() -> None:
    """Any failure of the discovery is wrapped as discovery error."""

    def discover() -> FakeLedgerDevice:
        raise OSError("no device connected")

    with pytest.raises(HWKeyDiscoveryError, match="no device connected"):
        HardwareKeySecp256k1.create(PATH, discover)  # type: ignore[arg-type]


def test_discovery_returns_nothing() -> None:
    """Discovery returning no device is a discovery error."""
    with pytest.raises(HWKeyDiscoveryError):
        HardwareKeySecp256k1.create(PATH, lambda: None)  # type: ignore[arg-type, return-value]


def test_public_key_retrieval_failure() -> None:
    """Communication failure tells the operator to open the application."""
    device = FakeLedgerDevice(public_key_error=OSError("device locked"))
    with pytest.raises(HWKeyConnectionError) as exc_info:
        create_key(device)
    assert "please open the Cosmos app on the Ledger device" in str(exc_info.value)
    assert "device locked" in str(exc_info.value)


def test_invalid_public_key_from_device() -> None:
    """Invalid point is a parsing error."""
    device = FakeLedgerDevice(public_key=b"\x02" + b"\xff" * 32)
    with pytest.raises(HWKeyParsingError, match="error parsing public key"):
        create_key(device)


def test_uncompressed_public_key_from_device() -> None:
    """Uncompressed key reported by the device is cached in compressed form."""
    key = create_key(FakeLedgerDevice(public_key=G_UNCOMPRESSED))
    exported = key.public_key.export()
    assert len(exported) == 33
    assert exported[0] in (0x02, 0x03)
    assert exported == G_COMPRESSED


def test_hybrid_public_key_from_device() -> None:
    """Hybrid point with the Y parity in its prefix is accepted."""
    key = create_key(FakeLedgerDevice(public_key=b"\x06" + G_UNCOMPRESSED[1:]))
    assert key.public_key.export() == G_COMPRESSED


def test_validate(fake_device: FakeLedgerDevice) -> None:
    """Validation succeeds while the device reports the cached key."""
    key = create_key(fake_device)
    key.validate()
    assert fake_device.count("get_public_key") == 2


def test_validate_mismatch(fake_device: FakeLedgerDevice) -> None:
    """Different key on the device is reported as mismatch, the cache is kept."""
    key = create_key(fake_device)
    fake_device.public_key = G2_COMPRESSED
    with pytest.raises(HWKeyKeysNotMatchingError, match="cached key does not match"):
        key.validate()
    assert key.public_key.export() == G_COMPRESSED


def test_validate_communication_failure(fake_device: FakeLedgerDevice) -> None:
    """Failure to re-derive the key propagates."""
    key = create_key(fake_device)
    fake_device.public_key_error = OSError("unplugged")
    with pytest.raises(HWKeyConnectionError):
        key.validate()


def test_equality() -> None:
    """Keys are equal when their cached public keys are equal, regardless of path."""
    key = create_key(FakeLedgerDevice())
    same = HardwareKeySecp256k1.create(
        [44, 118, 1, 0, 0],
        static_discovery(FakeLedgerDevice(public_key=G_UNCOMPRESSED)),  # type: ignore[arg-type]
    )
    other = create_key(FakeLedgerDevice(public_key=G2_COMPRESSED))
    assert key == same
    assert hash(key) == hash(same)
    assert key != other
    assert key != key.public_key
    assert key != G_COMPRESSED
    assert key != None  # pylint: disable=singleton-comparison


@pytest.mark.parametrize(
    "version", [VersionInfo(1, 1, 0), VersionInfo(1, 5, 3), VersionInfo(2, 0, 0)]
)
def test_sign_with_confirmation(version: VersionInfo) -> None:
    """Application 1.1 and newer asks the operator to confirm the displayed address."""
    device = FakeLedgerDevice(version=version)
    key = create_key(device, "yes\n")
    operator = key.operator
    assert isinstance(operator, ScriptedOperator)

    signature = key.sign(b"message")

    assert signature == R_BYTES + S_BYTES
    prompts = [message for message in operator.messages if message.startswith("Please confirm")]
    assert prompts == [
        "Please confirm if address displayed on ledger is identical to "
        f"{key.address()} (yes/no)?"
    ]
    assert operator.reads == 1
    assert "Please verify the transaction data on ledger" in operator.messages
    assert [call[0] for call in device.calls[1:]] == ["get_version", "show_address", "sign"]
    assert device.calls[2] == ("show_address", tuple(PATH), "cosmos")
    assert device.calls[3] == ("sign", tuple(PATH), b"message")


@pytest.mark.parametrize(
    "version", [VersionInfo(1, 0, 0), VersionInfo(1, 0, 9), VersionInfo(0, 9, 0)]
)
def test_sign_without_confirmation(version: VersionInfo) -> None:
    """Older application versions sign directly."""
    device = FakeLedgerDevice(version=version)
    key = create_key(device)
    operator = key.operator
    assert isinstance(operator, ScriptedOperator)

    assert key.sign(b"message") == R_BYTES + S_BYTES
    assert device.count("show_address") == 0
    assert operator.reads == 0
    assert operator.messages == ["Please verify the transaction data on ledger"]
    assert device.count("sign") == 1


@pytest.mark.parametrize("answer", ["y\n", "Y", "yes", " YES \n", "\tYes"])
def test_sign_accepted_answers(answer: str) -> None:
    """Confirmation is case-insensitive and ignores surrounding whitespace."""
    device = FakeLedgerDevice()
    key = create_key(device, answer)
    assert key.sign(b"message") == R_BYTES + S_BYTES


@pytest.mark.parametrize("answer", [" No \n", "no", "n", "", "\n", "yess", "ok"])
def test_sign_rejected(answer: str) -> None:
    """Anything but y/yes rejects the signing before the device is asked to sign."""
    device = FakeLedgerDevice(version=VersionInfo(1, 1, 0))
    key = create_key(device, answer)
    with pytest.raises(HWKeyRejectedError, match="ledger account doesn't match"):
        key.sign(b"message")
    assert device.count("sign") == 0
    assert device.count("show_address") == 1


def test_sign_scenario() -> None:
    """Path 44/118/0/0/0 on application 1.2.0 confirmed by the operator."""
    device = FakeLedgerDevice(version=VersionInfo(1, 2, 0), signature=FIXED_DER)
    key = create_key(device, "yes\n")
    operator = key.operator
    assert isinstance(operator, ScriptedOperator)

    signature = key.sign(b"tx bytes")

    assert len(signature) == 64
    assert signature[:32] == R_BYTES
    assert signature[32:] == S_BYTES
    assert len([m for m in operator.messages if m.startswith("Please confirm")]) == 1
    assert operator.reads == 1


def test_sign_device_error_propagates(fake_device: FakeLedgerDevice) -> None:
    """Error reported by the device while signing propagates unchanged."""
    error = RuntimeError("transaction rejected on device")
    fake_device.sign_error = error
    key = create_key(fake_device, "yes")
    with pytest.raises(RuntimeError) as exc_info:
        key.sign(b"message")
    assert exc_info.value is error


def test_sign_malformed_signature(fake_device: FakeLedgerDevice) -> None:
    """Malformed signature from the device is a parsing error."""
    fake_device.signature = FIXED_DER[:-2]
    key = create_key(fake_device, "yes")
    with pytest.raises(HWKeyParsingError):
        key.sign(b"message")


def test_sign_input_closed(fake_device: FakeLedgerDevice) -> None:
    """Closed operator input stops the signing."""
    key = create_key(fake_device)
    with pytest.raises(HWKeyIOError):
        key.sign(b"message")
    assert fake_device.count("sign") == 0


def test_sign_console_operator(
    fake_device: FakeLedgerDevice, capsys: pytest.CaptureFixture
) -> None:
    """Console operator writes prompts to the standard output and reads the answer."""
    key = HardwareKeySecp256k1.create(
        PATH,
        static_discovery(fake_device),  # type: ignore[arg-type]
        operator=ConsoleOperator(interactive=True, input_stream=io.StringIO("y\n")),
    )
    assert key.sign(b"message") == R_BYTES + S_BYTES
    output = capsys.readouterr().out
    assert f"identical to {key.address()} (yes/no)?" in output
    assert "Please verify the transaction data on ledger\n" in output


def test_sign_non_interactive(fake_device: FakeLedgerDevice) -> None:
    """Required confirmation fails when the interactive mode is turned off."""
    key = HardwareKeySecp256k1.create(
        PATH,
        static_discovery(fake_device),  # type: ignore[arg-type]
        operator=ConsoleOperator(interactive=False),
    )
    with pytest.raises(HWKeyConfigurationError):
        key.sign(b"message")
    assert fake_device.count("sign") == 0


def test_sign_low_s() -> None:
    """Optional low-S normalization of produced signatures."""
    device = FakeLedgerDevice(
        version=VersionInfo(1, 0, 0),
        signature=ECDSASignature(1, SECP256K1_ORDER - 2).export(HWKeyEncoding.DER),
    )
    key = HardwareKeySecp256k1.create(
        PATH, static_discovery(device), low_s=True  # type: ignore[arg-type]
    )
    assert key.sign(b"message")[32:] == (2).to_bytes(32, "big")


def test_address_prefix(fake_device: FakeLedgerDevice) -> None:
    """Address uses the configured prefix, which is also sent to the device."""
    key = HardwareKeySecp256k1.create(
        PATH,
        static_discovery(fake_device),  # type: ignore[arg-type]
        operator=ScriptedOperator(["yes"]),
        address_prefix="osmo",
    )
    assert key.address().startswith("osmo1")
    assert key.address("cosmos") == key.public_key.address("cosmos")
    key.sign(b"message")
    assert ("show_address", tuple(PATH), "osmo") in fake_device.calls


def test_export_parse(fake_device: FakeLedgerDevice) -> None:
    """Only the public key and the path are serialized."""
    key = HardwareKeySecp256k1.create(
        "m/44'/118'/0'/0/0", static_discovery(fake_device)  # type: ignore[arg-type]
    )
    data = key.export()
    assert data[:33] == G_COMPRESSED
    assert data[33] == 5
    assert len(data) == 33 + 1 + 5 * 4

    restored = HardwareKeySecp256k1.parse(data)
    assert restored == key
    assert restored.path == key.path
    assert str(restored.path) == "m/44'/118'/0'/0/0"
    assert not restored.is_attached


def test_detached_key(fake_device: FakeLedgerDevice) -> None:
    """Detached key can't sign nor validate."""
    key = HardwareKeySecp256k1.parse(create_key(fake_device).export())
    with pytest.raises(HWKeyConfigurationError):
        key.sign(b"message")
    with pytest.raises(HWKeyConfigurationError):
        key.validate()
    assert key.address().startswith("cosmos1")


@pytest.mark.parametrize(
    "data",
    [
        b"",
        G_COMPRESSED,
        G_COMPRESSED + b"\x02\x00\x00\x00\x2c",
        G_COMPRESSED + b"\x01\x00\x00\x00\x2c\x00",
        b"\x02" + b"\xff" * 32 + b"\x00",
    ],
    ids=["empty", "no-path", "short-path", "long-path", "invalid-point"],
)
def test_parse_invalid(data: bytes) -> None:
    """Corrupted serialized key is a parsing error."""
    with pytest.raises(HWKeyParsingError):
        HardwareKeySecp256k1.parse(data)


def test_load(fake_device: FakeLedgerDevice) -> None:
    """Loaded key is attached to a discovered device and validated."""
    data = create_key(fake_device).export()
    device = FakeLedgerDevice()
    key = HardwareKeySecp256k1.load(data, static_discovery(device))  # type: ignore[arg-type]
    assert key.is_attached
    assert device.count("get_public_key") == 1


def test_load_other_device(fake_device: FakeLedgerDevice) -> None:
    """Loading the key with a device holding different secret fails."""
    data = create_key(fake_device).export()
    with pytest.raises(HWKeyKeysNotMatchingError):
        HardwareKeySecp256k1.load(
            data,
            static_discovery(FakeLedgerDevice(public_key=G2_COMPRESSED)),  # type: ignore[arg-type]
        )


def test_errors_share_base_class() -> None:
    """All failures of the key can be caught with the base exception."""
    with pytest.raises(HWKeyError):
        HardwareKeySecp256k1.create(PATH, None)


def test_str(fake_device: FakeLedgerDevice) -> None:
    """Description contains the path, the key and the address."""
    key = create_key(fake_device)
    assert "m/44/118/0/0/0" in str(key)
    assert G_COMPRESSED.hex() in str(key)
    assert repr(key) == "HardwareKeySecp256k1(m/44/118/0/0/0)"
    assert isinstance(key.public_key, PublicKeySecp256k1)
