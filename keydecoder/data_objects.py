# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Dataclass objects passed between the decoding stages."""

from dataclasses import dataclass
from typing import Optional

from pyasn1.type import univ

from keydecoder.keyenums import CipherAlgorithm, HashAlgorithm


@dataclass(frozen=True)
class AlgorithmIdentifier:
    """An algorithm OID with its still undecoded parameters.

    Attributes:
        oid: The algorithm OID.
        parameters: The DER-encoded parameters, or `None` if the field was absent.

    """

    oid: univ.ObjectIdentifier
    parameters: Optional[bytes] = None


@dataclass(frozen=True)
class EncryptedKeyEnvelope:
    """The outer `EncryptedPrivateKeyInfo` structure."""

    algorithm_identifier: AlgorithmIdentifier
    encrypted_payload: bytes


@dataclass(frozen=True)
class Pbes2Parameters:
    """The `PBES2-params` structure."""

    key_derivation_func: AlgorithmIdentifier
    encryption_scheme: AlgorithmIdentifier


@dataclass(frozen=True)
class Pbkdf2Parameters:
    """The `PBKDF2-params` structure, with the salt always inlined.

    Attributes:
        salt: The `specified` salt.
        iteration_count: The iteration count, as encoded.
        key_length: The optional key length, `None` if absent.
        prf: The PRF algorithm identifier (defaults to hmacWithSHA1 if absent).

    """

    salt: bytes
    iteration_count: int
    prf: AlgorithmIdentifier
    key_length: Optional[int] = None


@dataclass(frozen=True)
class ResolvedCipherSpec:
    """The resolved content encryption scheme."""

    cipher: CipherAlgorithm
    iv: bytes

    @property
    def key_size(self) -> int:
        """The size of the key to derive in bytes."""
        return self.cipher.key_size


@dataclass(frozen=True)
class EncryptedKeyDetails:
    """Non-secret summary of an encrypted private key, available without the password."""

    kdf: str
    prf: HashAlgorithm
    cipher: CipherAlgorithm
    iteration_count: int
    salt_length: int
    encrypted_length: int
