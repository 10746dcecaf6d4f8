#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""SECP256K1 public keys and ECDSA signatures.

This module converts the data produced by signing devices into the canonical
forms used by the rest of a wallet: 33-byte compressed public keys and 64-byte
``R || S`` signatures.
"""

import logging
from typing import Any, Optional

from bech32 import bech32_encode, convertbits
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ec, utils
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    PublicFormat,
    load_der_public_key,
)
from pyasn1.codec.der.decoder import decode
from pyasn1.error import PyAsn1Error
from pyasn1.type import namedtype, univ
from typing_extensions import Self

from hwkey.crypto.crypto_types import HWKeyEncoding
from hwkey.crypto.hash import EnumHashAlgorithm, get_hash, get_hash_algorithm
from hwkey.exceptions import HWKeyError, HWKeyParsingError, HWKeyValueError
from hwkey.utils.abstract import BaseClass
from hwkey.utils.misc import Endianness

logger = logging.getLogger(__name__)

COORDINATE_LENGTH = 32
SIGNATURE_LENGTH = 2 * COORDINATE_LENGTH
COMPRESSED_KEY_LENGTH = COORDINATE_LENGTH + 1
UNCOMPRESSED_KEY_LENGTH = 2 * COORDINATE_LENGTH + 1
HYBRID_PREFIXES = (0x06, 0x07)

SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


class DssSignature(univ.Sequence):
    """ASN.1 ECDSA signature structure.

    Dss-Sig-Value  ::=  SEQUENCE  {
        r       INTEGER,
        s       INTEGER
    }
    """


DssSignature.componentType = namedtype.NamedTypes(
    namedtype.NamedType("r", univ.Integer()),
    namedtype.NamedType("s", univ.Integer()),
)


def _decode_der_lenient(signature: bytes) -> tuple[int, int]:
    """Decode DER signature without the minimal-encoding checks.

    Some devices emit integers with superfluous zero padding which strict DER
    parsers refuse, the values themselves are still well defined.

    :param signature: DER-like encoded signature.
    :raises HWKeyParsingError: The data is not a sequence of two integers.
    :return: Tuple of r and s.
    """
    try:
        decoded, rest = decode(signature, asn1Spec=DssSignature())
        r, s = int(decoded["r"]), int(decoded["s"])
    except PyAsn1Error as exc:
        raise HWKeyParsingError(f"Invalid DER signature: {exc}") from exc
    if rest:
        raise HWKeyParsingError(f"Invalid DER signature: {len(rest)} trailing bytes")
    return r, s


def decode_der_signature(signature: bytes) -> tuple[int, int]:
    """Decode DER encoded ECDSA signature into its integer components.

    The lengths of the DER elements are honored, so zero padding and short
    integers are handled. R and S must be positive and fit into 32 bytes, an
    INTEGER without content bytes is read as zero and refused as well.

    :param signature: DER encoded signature.
    :raises HWKeyParsingError: Malformed signature.
    :return: Tuple of r and s.
    """
    if not signature:
        raise HWKeyParsingError("Invalid DER signature: empty data")
    try:
        r, s = utils.decode_dss_signature(signature)
    except ValueError:
        logger.debug("Strict DER decoding failed, trying the lenient one")
        r, s = _decode_der_lenient(signature)
    for name, value in (("R", r), ("S", s)):
        if value < 0:
            raise HWKeyParsingError(f"Invalid DER signature: {name} is negative")
        if value == 0:
            raise HWKeyParsingError(f"Invalid DER signature: {name} is zero")
        if value.bit_length() > 8 * COORDINATE_LENGTH:
            raise HWKeyParsingError(
                f"Invalid DER signature: {name} is longer than {COORDINATE_LENGTH} bytes"
            )
    return r, s


class ECDSASignature:
    """SECP256K1 ECDSA signature.

    :cvar COORDINATE_LENGTH: Length of a single signature component in bytes.
    """

    COORDINATE_LENGTH = COORDINATE_LENGTH

    def __init__(self, r: int, s: int) -> None:
        """Initialize ECDSA signature with r and s values.

        :param r: The r component of the signature.
        :param s: The s component of the signature.
        :raises HWKeyValueError: Component out of range.
        """
        for value in (r, s):
            if value < 0 or value.bit_length() > 8 * self.COORDINATE_LENGTH:
                raise HWKeyValueError(f"Signature component out of range: {hex(value)}")
        self.r = r
        self.s = s

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, ECDSASignature) and (self.r, self.s) == (other.r, other.s)

    def __repr__(self) -> str:
        return f"ECDSASignature(r={hex(self.r)}, s={hex(self.s)})"

    @classmethod
    def parse(cls, signature: bytes, encoding: Optional[HWKeyEncoding] = None) -> Self:
        """Parse signature in DER or RAW format.

        :param signature: Binary signature data.
        :param encoding: Encoding of the data, detected when not given.
        :raises HWKeyParsingError: Invalid signature data.
        :return: New instance with parsed signature components.
        """
        encoding = encoding or cls.get_encoding(signature)
        if encoding == HWKeyEncoding.DER:
            r, s = decode_der_signature(signature)
            return cls(r, s)
        if encoding == HWKeyEncoding.RAW:
            if len(signature) != SIGNATURE_LENGTH:
                raise HWKeyParsingError(
                    f"Invalid RAW signature length {len(signature)}, expected {SIGNATURE_LENGTH}"
                )
            r = int.from_bytes(signature[:COORDINATE_LENGTH], Endianness.BIG.value)
            s = int.from_bytes(signature[COORDINATE_LENGTH:], Endianness.BIG.value)
            return cls(r, s)
        raise HWKeyParsingError(f"Invalid signature encoding {encoding.value}")

    def export(self, encoding: HWKeyEncoding = HWKeyEncoding.RAW) -> bytes:
        """Export signature in RAW (R || S) or DER format.

        :param encoding: Signature encoding format.
        :raises HWKeyValueError: Invalid signature encoding format.
        :return: Signature as bytes in the specified encoding format.
        """
        if encoding == HWKeyEncoding.RAW:
            r_bytes = self.r.to_bytes(self.COORDINATE_LENGTH, Endianness.BIG.value)
            s_bytes = self.s.to_bytes(self.COORDINATE_LENGTH, Endianness.BIG.value)
            return r_bytes + s_bytes
        if encoding == HWKeyEncoding.DER:
            return utils.encode_dss_signature(self.r, self.s)
        raise HWKeyValueError(f"Invalid signature encoding {encoding.value}")

    @classmethod
    def get_encoding(cls, signature: bytes) -> HWKeyEncoding:
        """Get encoding of signature.

        :param signature: The signature bytes to analyze.
        :raises HWKeyParsingError: Signature doesn't match any supported encoding.
        :return: The detected encoding format.
        """
        if signature[:1] == b"\x30":
            try:
                decode_der_signature(signature)
                return HWKeyEncoding.DER
            except HWKeyParsingError:
                pass
        if len(signature) == SIGNATURE_LENGTH:
            return HWKeyEncoding.RAW
        raise HWKeyParsingError(
            f"The given signature with length {len(signature)} does not match any encoding"
        )

    @property
    def is_low_s(self) -> bool:
        """Whether S lies in the lower half of the curve order."""
        return self.s <= SECP256K1_ORDER // 2

    def normalize_s(self) -> Self:
        """Get the equivalent signature with S in the lower half of the curve order.

        :return: New signature, the same values when S is already low.
        """
        if self.is_low_s:
            return self.__class__(self.r, self.s)
        return self.__class__(self.r, SECP256K1_ORDER - self.s)


def convert_der_to_raw(signature: bytes, low_s: bool = False) -> bytes:
    """Convert DER signature produced by a device into the 64-byte R || S form.

    :param signature: DER encoded signature.
    :param low_s: Normalize S into the lower half of the curve order.
    :raises HWKeyParsingError: Malformed signature.
    :return: 32 bytes of R followed by 32 bytes of S, both big endian.
    """
    ecdsa_signature = ECDSASignature.parse(signature, encoding=HWKeyEncoding.DER)
    if low_s:
        ecdsa_signature = ecdsa_signature.normalize_s()
    return ecdsa_signature.export(HWKeyEncoding.RAW)


def encode_bech32_address(prefix: str, data: bytes) -> str:
    """Encode data as bech32 string with human readable prefix.

    :param prefix: Human readable part, e.g. "cosmos".
    :param data: Payload.
    :raises HWKeyValueError: The data can't be encoded.
    :return: Bech32 string.
    """
    words = convertbits(data, 8, 5)
    if not prefix or words is None:
        raise HWKeyValueError(f"Cannot encode bech32 address with prefix '{prefix}'")
    address = bech32_encode(prefix, words)
    if address is None:
        raise HWKeyValueError(f"Cannot encode bech32 address with prefix '{prefix}'")
    return address


class PublicKeySecp256k1(BaseClass):
    """SECP256K1 public key.

    The canonical binary form is the 33-byte compressed point.
    """

    key: ec.EllipticCurvePublicKey

    def __init__(self, key: ec.EllipticCurvePublicKey) -> None:
        """Create public key.

        :param key: Elliptic curve public key instance.
        :raises HWKeyValueError: The key is not on the SECP256K1 curve.
        """
        if not isinstance(key.curve, ec.SECP256K1):
            raise HWKeyValueError(f"Unsupported curve {key.curve.name}, expected secp256k1")
        self.key = key

    def __eq__(self, obj: Any) -> bool:
        return isinstance(obj, PublicKeySecp256k1) and self.export() == obj.export()

    def __hash__(self) -> int:
        return hash(self.export())

    def __repr__(self) -> str:
        return "ECC secp256k1 Public Key"

    def __str__(self) -> str:
        return f"ECC (secp256k1) Public key: {self.export().hex()}"

    @property
    def x(self) -> int:
        """X coordinate of the point."""
        return self.key.public_numbers().x

    @property
    def y(self) -> int:
        """Y coordinate of the point."""
        return self.key.public_numbers().y

    def export(self, encoding: HWKeyEncoding = HWKeyEncoding.COMPRESSED) -> bytes:
        """Export the public key.

        :param encoding: COMPRESSED (33 bytes), RAW (X || Y), DER or PEM, defaults to COMPRESSED.
        :return: Public key as bytes in the specified format.
        """
        if encoding == HWKeyEncoding.COMPRESSED:
            return self.key.public_bytes(Encoding.X962, PublicFormat.CompressedPoint)
        if encoding == HWKeyEncoding.RAW:
            x_bytes = self.x.to_bytes(COORDINATE_LENGTH, Endianness.BIG.value)
            y_bytes = self.y.to_bytes(COORDINATE_LENGTH, Endianness.BIG.value)
            return x_bytes + y_bytes
        return self.key.public_bytes(
            HWKeyEncoding.get_cryptography_encodings(encoding),
            PublicFormat.SubjectPublicKeyInfo,
        )

    @classmethod
    def recreate(cls, coor_x: int, coor_y: int) -> Self:
        """Recreate public key from coordinates.

        :param coor_x: X coordinate of point on curve.
        :param coor_y: Y coordinate of point on curve.
        :raises HWKeyParsingError: The point is not on the curve.
        :return: Public key.
        """
        try:
            pub_numbers = ec.EllipticCurvePublicNumbers(x=coor_x, y=coor_y, curve=ec.SECP256K1())
            key = pub_numbers.public_key()
        except ValueError as exc:
            raise HWKeyParsingError(f"Cannot recreate the public key: {str(exc)}") from exc
        return cls(key)

    @classmethod
    def parse(cls, data: bytes) -> Self:
        """Parse public key from the bytes reported by a device.

        Supported forms are the compressed (33 bytes) and uncompressed (65 bytes)
        SEC1 points, hybrid SEC1 points (65 bytes, prefix 0x06 or 0x07), raw X || Y
        coordinates (64 bytes) and DER SubjectPublicKeyInfo.

        :param data: Public key data.
        :raises HWKeyParsingError: The data doesn't contain a valid SECP256K1 point.
        :return: Public key.
        """
        if len(data) == SIGNATURE_LENGTH:
            return cls.recreate(
                int.from_bytes(data[:COORDINATE_LENGTH], Endianness.BIG.value),
                int.from_bytes(data[COORDINATE_LENGTH:], Endianness.BIG.value),
            )
        if len(data) == UNCOMPRESSED_KEY_LENGTH and data[0] in HYBRID_PREFIXES:
            # Hybrid prefix carries the parity of Y
            if (data[0] & 1) != (data[-1] & 1):
                raise HWKeyParsingError("Invalid SECP256K1 point: hybrid prefix doesn't match Y")
            data = b"\x04" + data[1:]
        if len(data) in (COMPRESSED_KEY_LENGTH, UNCOMPRESSED_KEY_LENGTH):
            try:
                return cls(ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), data))
            except ValueError as exc:
                raise HWKeyParsingError(f"Invalid SECP256K1 point: {str(exc)}") from exc
        try:
            key = load_der_public_key(data)
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise HWKeyParsingError(
                f"Can't parse SECP256K1 public key from {len(data)} bytes of data"
            ) from exc
        if not isinstance(key, ec.EllipticCurvePublicKey):
            raise HWKeyParsingError("The public key is not an elliptic curve key")
        try:
            return cls(key)
        except HWKeyValueError as exc:
            raise HWKeyParsingError(str(exc.description)) from exc

    def address_hash(self) -> bytes:
        """Get the 20-byte account identifier, RIPEMD160(SHA256(compressed key)).

        :return: Address bytes.
        """
        return get_hash(get_hash(self.export()), EnumHashAlgorithm.RIPEMD160)

    def address(self, prefix: str) -> str:
        """Get bech32 account address.

        :param prefix: Human readable address prefix, e.g. "cosmos".
        :return: Bech32 encoded address.
        """
        return encode_bech32_address(prefix, self.address_hash())

    def verify_signature(self, signature: bytes, data: bytes) -> bool:
        """Verify SHA-256 ECDSA signature in RAW or DER format.

        :param signature: The signature to verify.
        :param data: Signed data.
        :return: True if signature is valid, False otherwise.
        """
        try:
            der_signature = ECDSASignature.parse(signature).export(HWKeyEncoding.DER)
        except HWKeyError:
            return False
        try:
            self.key.verify(
                der_signature, data, ec.ECDSA(get_hash_algorithm(EnumHashAlgorithm.SHA256))
            )
            return True
        except InvalidSignature:
            return False
