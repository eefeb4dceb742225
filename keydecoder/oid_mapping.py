# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Resolve the OIDs of a PBES2 encrypted private key to the supported algorithms.

Each resolution point accepts an explicit, closed set of algorithms. Anything else raises
`UnsupportedAlgorithm`; there is no default.
"""

import logging
from typing import Dict

from pyasn1.type import univ
from pyasn1_alt_modules import rfc8018, rfc9481
from robot.api.deco import not_keyword

from keydecoder.asn1utils import decode_iv
from keydecoder.data_objects import AlgorithmIdentifier, ResolvedCipherSpec
from keydecoder.exceptions import UnsupportedAlgorithm
from keydecoder.keyenums import CipherAlgorithm, HashAlgorithm
from keydecoder.oidutils import id_PBES2, id_PBKDF2

PRF_OID_2_HASH: Dict[univ.ObjectIdentifier, HashAlgorithm] = {
    rfc8018.id_hmacWithSHA1: HashAlgorithm.SHA1,
    rfc9481.id_hmacWithSHA224: HashAlgorithm.SHA224,
    rfc9481.id_hmacWithSHA256: HashAlgorithm.SHA256,
}

CIPHER_OID_2_ALG: Dict[univ.ObjectIdentifier, CipherAlgorithm] = {
    rfc9481.id_aes128_CBC: CipherAlgorithm.AES128_CBC,
    rfc9481.id_aes256_CBC: CipherAlgorithm.AES256_CBC,
}
CIPHER_ALG_2_OID = {v: k for k, v in CIPHER_OID_2_ALG.items()}


@not_keyword
def resolve_wrapper(alg_id: AlgorithmIdentifier) -> None:
    """Accept the outer encryption algorithm only if it is PBES2.

    :param alg_id: The `encryptionAlgorithm` of the `EncryptedPrivateKeyInfo`.
    :raises UnsupportedAlgorithm: If the algorithm is not PBES2.
    """
    if alg_id.oid != id_PBES2:
        raise UnsupportedAlgorithm(alg_id.oid, "PKCS#5 wrapper algorithm")


@not_keyword
def resolve_kdf(alg_id: AlgorithmIdentifier) -> None:
    """Accept the key derivation function only if it is PBKDF2.

    :param alg_id: The `keyDerivationFunc` of the `PBES2-params`.
    :raises UnsupportedAlgorithm: If the algorithm is not PBKDF2.
    """
    if alg_id.oid != id_PBKDF2:
        raise UnsupportedAlgorithm(alg_id.oid, "key derivation function")


@not_keyword
def resolve_prf(alg_id: AlgorithmIdentifier) -> HashAlgorithm:
    """Resolve the PBKDF2 PRF to the hash algorithm used by HMAC.

    :param alg_id: The `prf` of the `PBKDF2-params`.
    :return: The hash algorithm.
    :raises UnsupportedAlgorithm: If the PRF is not HMAC with SHA-1, SHA-224 or SHA-256.
    """
    hash_alg = PRF_OID_2_HASH.get(alg_id.oid)
    if hash_alg is None:
        raise UnsupportedAlgorithm(alg_id.oid, "PBKDF2 PRF")
    return hash_alg


@not_keyword
def resolve_cipher(alg_id: AlgorithmIdentifier) -> ResolvedCipherSpec:
    """Resolve the encryption scheme and decode its IV.

    The IV is decoded only after the OID was accepted.

    :param alg_id: The `encryptionScheme` of the `PBES2-params`.
    :return: The cipher and its IV.
    :raises UnsupportedAlgorithm: If the scheme is not AES-128-CBC or AES-256-CBC.
    :raises BadAsn1Data: If the IV is absent or not 16 bytes long.
    """
    cipher = CIPHER_OID_2_ALG.get(alg_id.oid)
    if cipher is None:
        raise UnsupportedAlgorithm(alg_id.oid, "encryption scheme")

    logging.debug("Resolved encryption scheme: %s", cipher.value)
    return ResolvedCipherSpec(cipher=cipher, iv=decode_iv(alg_id.parameters))
