#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey hash algorithms.

SHA-256 comes from the cryptography library, RIPEMD-160 (needed for the
account address) from pycryptodome since OpenSSL 3 builds often drop it.
"""

from Crypto.Hash import RIPEMD160
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as hmac_cls

from hwkey.exceptions import HWKeyError
from hwkey.utils.hwkey_enum import HWKeyEnum


class EnumHashAlgorithm(HWKeyEnum):
    """Hash algorithm enumeration."""

    SHA256 = (1, "sha256", "SHA256")
    RIPEMD160 = (2, "ripemd160", "RIPEMD160")


def get_hash_algorithm(algorithm: EnumHashAlgorithm) -> hashes.HashAlgorithm:
    """Get cryptography hash algorithm instance for specified algorithm type.

    :param algorithm: Hash algorithm type enumeration value.
    :raises HWKeyError: If the algorithm is not provided by the cryptography library.
    :return: Instance of the corresponding hash algorithm class.
    """
    if algorithm == EnumHashAlgorithm.SHA256:
        return hashes.SHA256()
    raise HWKeyError(f"Unsupported algorithm: hashes.{algorithm.label.upper()}")


def get_hash(data: bytes, algorithm: EnumHashAlgorithm = EnumHashAlgorithm.SHA256) -> bytes:
    """Compute hash digest from input data using specified algorithm.

    :param data: Input data to be hashed.
    :param algorithm: Hash algorithm to use for computation.
    :return: Hash digest as bytes.
    """
    if algorithm == EnumHashAlgorithm.RIPEMD160:
        return RIPEMD160.new(data).digest()
    hash_obj = hashes.Hash(get_hash_algorithm(algorithm))
    hash_obj.update(data)
    return hash_obj.finalize()


def hmac(key: bytes, data: bytes, algorithm: EnumHashAlgorithm = EnumHashAlgorithm.SHA256) -> bytes:
    """Compute HMAC from data with specified key and algorithm.

    :param key: The cryptographic key.
    :param data: Input data to be authenticated.
    :param algorithm: Hash algorithm type for HMAC computation, defaults to SHA256.
    :return: HMAC digest as bytes.
    """
    hmac_obj = hmac_cls.HMAC(key, get_hash_algorithm(algorithm))
    hmac_obj.update(data)
    return hmac_obj.finalize()
