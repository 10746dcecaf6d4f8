#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey cryptographic encodings."""

from cryptography import utils
from cryptography.hazmat.primitives.serialization import Encoding

from hwkey.exceptions import HWKeyError


class HWKeyEncoding(utils.Enum):
    """HWKey encoding enumeration.

    RAW stands for the fixed-width big-endian encoding (R || S for signatures,
    X || Y for public keys), COMPRESSED for the 33-byte SEC1 point.
    """

    RAW = "RAW"
    COMPRESSED = "COMPRESSED"
    PEM = "PEM"
    DER = "DER"

    @staticmethod
    def get_cryptography_encodings(encoding: "HWKeyEncoding") -> Encoding:
        """Get cryptography library encoding from HWKey encoding.

        :param encoding: HWKey encoding type to convert.
        :raises HWKeyError: If the encoding format is not supported by cryptography.
        :return: Corresponding cryptography library encoding.
        """
        cryptography_encoding = {
            HWKeyEncoding.PEM: Encoding.PEM,
            HWKeyEncoding.DER: Encoding.DER,
        }.get(encoding)
        if cryptography_encoding is None:
            raise HWKeyError(f"{encoding} format is not supported by cryptography.")
        return cryptography_encoding
