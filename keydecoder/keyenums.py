# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Enums for the algorithms a PBES2 encrypted private key may use.

Every object identifier found in an encrypted key is resolved to one of these members
before it is used, so the later stages never see a raw OID.
"""

import enum
from typing import List

from cryptography.hazmat.primitives import hashes

from keydecoder.exceptions import BadConfig


class HashAlgorithm(enum.Enum):
    """The hash algorithms allowed as HMAC PRF for PBKDF2."""

    SHA1 = "sha1"
    SHA224 = "sha224"
    SHA256 = "sha256"

    def hash_instance(self) -> hashes.HashAlgorithm:
        """Return a new `cryptography` hash instance for this algorithm."""
        if self is HashAlgorithm.SHA1:
            return hashes.SHA1()
        if self is HashAlgorithm.SHA224:
            return hashes.SHA224()
        return hashes.SHA256()

    @classmethod
    def get_names_lowercase(cls) -> List[str]:
        """Return the names of all enum members in lowercase."""
        return [member.value for member in cls]

    @staticmethod
    def get(value: str) -> "HashAlgorithm":
        """Return the member matching `value` (case-insensitive, an `hmac-` prefix is ignored).

        :param value: The name, e.g. "sha256" or "hmac-sha256".
        :return: The corresponding enum member.
        :raises BadConfig: If the value does not match any member.
        """
        name = value.lower().replace("hmac-", "").replace("-", "")
        for member in HashAlgorithm:
            if member.value == name:
                return member
        raise BadConfig(f"Unsupported PBKDF2 hash: {value}. Supported are {HashAlgorithm.get_names_lowercase()}.")


class CipherAlgorithm(enum.Enum):
    """The content encryption schemes allowed inside PBES2."""

    AES128_CBC = "aes128_cbc"
    AES256_CBC = "aes256_cbc"

    @property
    def key_size(self) -> int:
        """The AES key size in bytes."""
        return 16 if self is CipherAlgorithm.AES128_CBC else 32

    @classmethod
    def get_names_lowercase(cls) -> List[str]:
        """Return the names of all enum members in lowercase."""
        return [member.value for member in cls]

    @staticmethod
    def get(value: str) -> "CipherAlgorithm":
        """Return the member matching `value` (case-insensitive, e.g. "aes256_cbc" or "AES-256-CBC").

        :param value: The name of the cipher.
        :return: The corresponding enum member.
        :raises BadConfig: If the value does not match any member.
        """
        name = value.lower().replace("-", "").replace("_", "")
        for member in CipherAlgorithm:
            if member.value.replace("_", "") == name:
                return member
        raise BadConfig(f"Unsupported cipher: {value}. Supported are {CipherAlgorithm.get_names_lowercase()}.")
