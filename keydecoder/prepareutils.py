# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Prepare PBES2 encrypted private keys.

Builds the same `EncryptedPrivateKeyInfo` structures as OpenSSL or `imgtool.py`. The individual
`prepare_*` functions accept algorithm names outside the supported set, so that structures
for negative tests can be built.
"""

import logging
import os
from typing import Optional, Union

from cryptography.hazmat.primitives import serialization
from pyasn1.codec.der import encoder
from pyasn1.type import univ
from pyasn1.type.base import Asn1Item
from pyasn1_alt_modules import rfc5958, rfc8018
from robot.api.deco import keyword, not_keyword

from keydecoder import cryptoutils
from keydecoder.exceptions import BadConfig
from keydecoder.keyenums import CipherAlgorithm, HashAlgorithm
from keydecoder.oid_mapping import CIPHER_ALG_2_OID
from keydecoder.oidutils import (
    AES_CBC_OID_2_NAME,
    LEGACY_CIPHER_OID_2_NAME,
    PBKDF2_PRF_OID_2_NAME,
    id_PBES2,
    id_PBKDF2,
)
from keydecoder.typingutils import Password, PrivateKey
from keydecoder.utils import str_to_bytes

PRF_NAME_2_OID = {v: k for k, v in PBKDF2_PRF_OID_2_NAME.items()}
CBC_NAME_2_OID = {v: k for k, v in AES_CBC_OID_2_NAME.items()}
CBC_NAME_2_OID.update({v: k for k, v in LEGACY_CIPHER_OID_2_NAME.items()})


@not_keyword
def prepare_alg_id(
    oid: Union[str, univ.ObjectIdentifier], value: Optional[Asn1Item] = None
) -> rfc8018.AlgorithmIdentifier:
    """Prepare an `AlgorithmIdentifier` with the given OID and optional parameters.

    :param oid: The OID, as dotted string or object.
    :param value: The parameters. Defaults to `None` (absent).
    :return: The populated `AlgorithmIdentifier` structure.
    """
    alg_id = rfc8018.AlgorithmIdentifier()
    alg_id["algorithm"] = univ.ObjectIdentifier(oid)
    if value is not None:
        alg_id["parameters"] = value
    return alg_id


@not_keyword
def prepare_pbkdf2_alg_id(
    salt: Union[str, bytes],
    iterations: int = 2048,
    hash_alg: str = "sha256",
    key_length: Optional[int] = None,
) -> rfc8018.AlgorithmIdentifier:
    """Prepare the `PBKDF2` AlgorithmIdentifier object.

    :param salt: The salt. A string starting with "0x" is interpreted as hex.
    :param iterations: The iteration count. Defaults to 2048 (the OpenSSL default).
    :param hash_alg: The name of the hash algorithm to use with HMAC, e.g. "sha256" or "sha512".
    :param key_length: The optional `keyLength` field. Defaults to `None` (absent).
    :return: Populated `PBKDF2` AlgorithmIdentifier object.
    :raises BadConfig: If the hash algorithm has no known HMAC OID.
    """
    prf_oid = PRF_NAME_2_OID.get(f"hmac-{hash_alg.lower()}")
    if prf_oid is None:
        raise BadConfig(f"Unknown HMAC hash algorithm: {hash_alg}")

    pbkdf2_params = rfc8018.PBKDF2_params()
    pbkdf2_params["salt"]["specified"] = univ.OctetString(str_to_bytes(salt))
    pbkdf2_params["iterationCount"] = iterations
    if key_length is not None:
        pbkdf2_params["keyLength"] = key_length
    pbkdf2_params["prf"] = prepare_alg_id(prf_oid, univ.Null(""))

    return prepare_alg_id(id_PBKDF2, pbkdf2_params)


@not_keyword
def prepare_cbc_alg_id(name: str = "aes256_cbc", iv: Optional[bytes] = None) -> rfc8018.AlgorithmIdentifier:
    """Prepare the `AlgorithmIdentifier` of a CBC encryption scheme with the IV as parameters.

    :param name: The name of the cipher, e.g. "aes128_cbc", "aes256_cbc" or "des-cbc".
    :param iv: The IV. Defaults to 16 random bytes.
    :return: The populated `AlgorithmIdentifier` structure.
    :raises BadConfig: If the cipher name is unknown.
    """
    oid = CBC_NAME_2_OID.get(name.lower())
    if oid is None:
        raise BadConfig(f"Unknown CBC cipher: {name}")
    iv = os.urandom(16) if iv is None else iv
    return prepare_alg_id(oid, univ.OctetString(iv))


@not_keyword
def prepare_pbes2_alg_id(
    kdf_alg_id: rfc8018.AlgorithmIdentifier, enc_alg_id: rfc8018.AlgorithmIdentifier
) -> rfc8018.AlgorithmIdentifier:
    """Prepare the `PBES2` AlgorithmIdentifier with the given key derivation function and encryption scheme."""
    pbes2_params = rfc8018.PBES2_params()
    pbes2_params["keyDerivationFunc"] = kdf_alg_id
    pbes2_params["encryptionScheme"] = enc_alg_id
    return prepare_alg_id(id_PBES2, pbes2_params)


@not_keyword
def prepare_encrypted_private_key_info(
    alg_id: rfc8018.AlgorithmIdentifier, encrypted_data: bytes
) -> rfc5958.EncryptedPrivateKeyInfo:
    """Prepare an `EncryptedPrivateKeyInfo` structure.

    :param alg_id: The encryption algorithm.
    :param encrypted_data: The encrypted `PrivateKeyInfo`.
    :return: The populated `EncryptedPrivateKeyInfo`.
    """
    enc_key_info = rfc5958.EncryptedPrivateKeyInfo()
    enc_key_info["encryptionAlgorithm"]["algorithm"] = alg_id["algorithm"]
    if alg_id["parameters"].isValue:
        enc_key_info["encryptionAlgorithm"]["parameters"] = alg_id["parameters"]
    enc_key_info["encryptedData"] = univ.OctetString(encrypted_data)
    return enc_key_info


@keyword(name="Encrypt Private Key")
def encrypt_private_key(  # noqa: D417 for RF docs
    private_key: Union[PrivateKey, bytes],
    password: Password,
    cipher: str = "aes256_cbc",
    hash_alg: str = "sha256",
    iterations: int = 2048,
    salt: Optional[Union[str, bytes]] = None,
    iv: Optional[Union[str, bytes]] = None,
) -> bytes:
    """Encrypt a private key with PBES2 and return the DER-encoded `EncryptedPrivateKeyInfo`.

    Arguments:
    ---------
        - `private_key`: The private key object, or the DER-encoded `PrivateKeyInfo`.
        - `password`: The password. A string is encoded as UTF-8.
        - `cipher`: The cipher to use ("aes128_cbc" or "aes256_cbc"). Defaults to "aes256_cbc".
        - `hash_alg`: The hash algorithm of the PBKDF2 PRF ("sha1", "sha224" or "sha256"). Defaults to "sha256".
        - `iterations`: The PBKDF2 iteration count. Defaults to 2048.
        - `salt`: The salt. Defaults to 16 random bytes.
        - `iv`: The IV. Defaults to 16 random bytes.

    Returns:
    -------
        - The DER-encoded `EncryptedPrivateKeyInfo`.

    Raises:
    ------
        - `BadConfig`: If the cipher or hash algorithm is not supported.

    Examples:
    --------
    | ${der_data}= | Encrypt Private Key | ${key} | 11111 |
    | ${der_data}= | Encrypt Private Key | ${key} | 11111 | cipher=aes128_cbc | hash_alg=sha1 | iterations=10000 |

    """
    cipher_alg = CipherAlgorithm.get(cipher)
    prf = HashAlgorithm.get(hash_alg)
    salt = os.urandom(16) if salt is None else str_to_bytes(salt)
    iv = os.urandom(16) if iv is None else str_to_bytes(iv)

    if isinstance(private_key, bytes):
        plaintext = private_key
    else:
        plaintext = private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    password = password.encode("utf-8") if isinstance(password, str) else password
    key = cryptoutils.compute_pbkdf2(
        password=password, salt=salt, iterations=iterations, key_length=cipher_alg.key_size, hash_alg=prf
    )
    encrypted_data = cryptoutils.compute_aes_cbc_encrypt(key=key, data=plaintext, iv=iv)

    alg_id = prepare_pbes2_alg_id(
        kdf_alg_id=prepare_pbkdf2_alg_id(salt=salt, iterations=iterations, hash_alg=prf.value),
        enc_alg_id=prepare_alg_id(CIPHER_ALG_2_OID[cipher_alg], univ.OctetString(iv)),
    )
    logging.info("Encrypted private key with PBES2, PBKDF2-HMAC-%s and %s.", prf.value.upper(), cipher_alg.value)
    return encoder.encode(prepare_encrypted_private_key_info(alg_id, encrypted_data))
