# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Utility functions for loading PKCS#8 private keys encrypted with PBES2.

The keys are produced by tools such as MCUboot's `imgtool.py` or by OpenSSL, e.g.:

    openssl genpkey -algorithm RSA -pkeyopt rsa_keygen_bits:2048 -aes-256-cbc > keyfile.pem

Only PBES2 with PBKDF2 (HMAC-SHA1, HMAC-SHA224 or HMAC-SHA256) and AES-128-CBC or
AES-256-CBC is supported.
"""

import logging
from typing import Optional, Tuple

import cryptography.exceptions
from cryptography.hazmat.primitives import serialization
from robot.api.deco import keyword, not_keyword

from keydecoder import asn1utils, cryptoutils, oid_mapping, utils
from keydecoder.data_objects import EncryptedKeyDetails, EncryptedKeyEnvelope, Pbkdf2Parameters, ResolvedCipherSpec
from keydecoder.exceptions import BadAsn1Data, InvalidKeyData
from keydecoder.keyenums import HashAlgorithm
from keydecoder.passwordutils import DEFAULT_PROMPT, acquire_password
from keydecoder.typingutils import Password, PrivateKey


def _decode_and_resolve(
    der: bytes,
) -> Tuple[EncryptedKeyEnvelope, Pbkdf2Parameters, HashAlgorithm, ResolvedCipherSpec]:
    """Decode all structures of the encrypted key and resolve every algorithm, without decrypting."""
    try:
        envelope = asn1utils.decode_envelope(der)
    except BadAsn1Data as err:
        logging.debug("Decoding the `EncryptedPrivateKeyInfo` failed: %s", err.get_error_details())
        raise
    oid_mapping.resolve_wrapper(envelope.algorithm_identifier)

    pbes2_params = asn1utils.decode_pbes2_params(envelope.algorithm_identifier.parameters)
    oid_mapping.resolve_kdf(pbes2_params.key_derivation_func)

    kdf_params = asn1utils.decode_pbkdf2_params(pbes2_params.key_derivation_func.parameters)
    hash_alg = oid_mapping.resolve_prf(kdf_params.prf)
    cipher_spec = oid_mapping.resolve_cipher(pbes2_params.encryption_scheme)

    logging.info(
        "Encrypted key uses PBES2 with PBKDF2-HMAC-%s (%d iterations, %d-byte salt) and %s.",
        hash_alg.value.upper(),
        kdf_params.iteration_count,
        len(kdf_params.salt),
        cipher_spec.cipher.value,
    )
    return envelope, kdf_params, hash_alg, cipher_spec


@not_keyword
def materialize_private_key(plaintext: bytes) -> PrivateKey:
    """Load the decrypted DER-encoded `PrivateKeyInfo` as a private key object.

    :param plaintext: The decrypted and unpadded data.
    :return: The loaded private key.
    :raises InvalidKeyData: If the data is not a valid, supported private key structure.
    """
    try:
        return serialization.load_der_private_key(plaintext, password=None)  # type: ignore
    except (ValueError, TypeError, cryptography.exceptions.UnsupportedAlgorithm) as err:
        raise InvalidKeyData("The decrypted data is not a valid private key structure.") from err


@keyword(name="Inspect Encrypted Private Key")
def inspect_encrypted_private_key(der: bytes) -> EncryptedKeyDetails:  # noqa: D417 for RF docs
    """Decode an encrypted private key and report the used algorithms, without a password.

    Can be used to check the effective PBKDF2 iteration count before the key is decrypted.

    Arguments:
    ---------
        - `der`: The DER-encoded `EncryptedPrivateKeyInfo`.

    Returns:
    -------
        - The `EncryptedKeyDetails` with the KDF, PRF, cipher, iteration count and salt length.

    Raises:
    ------
        - `BadAsn1Data`: If a structure could not be decoded.
        - `UnsupportedAlgorithm`: If an algorithm is not supported.

    Examples:
    --------
    | ${details}= | Inspect Encrypted Private Key | ${der_data} |
    | Should Be True | ${details.iteration_count} >= 2048 |

    """
    envelope, kdf_params, hash_alg, cipher_spec = _decode_and_resolve(der)
    return EncryptedKeyDetails(
        kdf="pbkdf2",
        prf=hash_alg,
        cipher=cipher_spec.cipher,
        iteration_count=kdf_params.iteration_count,
        salt_length=len(kdf_params.salt),
        encrypted_length=len(envelope.encrypted_payload),
    )


@keyword(name="Decrypt Encrypted Private Key")
def decrypt_encrypted_private_key(  # noqa: D417 for RF docs
    der: bytes,
    password: Optional[Password] = None,
    prompt: str = DEFAULT_PROMPT,
) -> bytes:
    """Decrypt an encrypted private key and return the DER-encoded `PrivateKeyInfo`.

    The password is only requested after all structures were decoded and all algorithms are supported.

    Arguments:
    ---------
        - `der`: The DER-encoded `EncryptedPrivateKeyInfo`.
        - `password`: The password. If `None` or empty, the password is prompted for on the terminal.
        - `prompt`: The prompt text. Defaults to "key password: ".

    Returns:
    -------
        - The decrypted DER-encoded `PrivateKeyInfo` (`OneAsymmetricKey`).

    Raises:
    ------
        - `BadAsn1Data`: If a structure could not be decoded.
        - `UnsupportedAlgorithm`: If an algorithm is not supported.
        - `InvalidPadding`: If the padding is invalid, usually because of a wrong password.
        - `PasswordAcquisitionFailed`: If the password could not be read.

    Examples:
    --------
    | ${one_asym_key}= | Decrypt Encrypted Private Key | ${der_data} | password=11111 |

    """
    envelope, kdf_params, hash_alg, cipher_spec = _decode_and_resolve(der)
    return cryptoutils.decrypt_pbes2(
        params=kdf_params,
        cipher_spec=cipher_spec,
        hash_alg=hash_alg,
        ciphertext=envelope.encrypted_payload,
        password=acquire_password(password, prompt=prompt),
    )


@keyword(name="Load Encrypted Private Key")
def load_encrypted_private_key(  # noqa: D417 for RF docs
    der: bytes,
    password: Optional[Password] = None,
    prompt: str = DEFAULT_PROMPT,
) -> PrivateKey:
    """Decrypt a PBES2 encrypted PKCS#8 private key and load it.

    Arguments:
    ---------
        - `der`: The DER-encoded `EncryptedPrivateKeyInfo`.
        - `password`: The password. If `None` or empty, the password is prompted for on the terminal.
        - `prompt`: The prompt text. Defaults to "key password: ".

    Returns:
    -------
        - The loaded private key, e.g. `RSAPrivateKey` or `EllipticCurvePrivateKey`.

    Raises:
    ------
        - `BadAsn1Data`: If a structure could not be decoded.
        - `UnsupportedAlgorithm`: If an algorithm is not supported.
        - `InvalidPadding`: If the padding is invalid, usually because of a wrong password.
        - `InvalidKeyData`: If the decrypted data is not a valid private key.
        - `PasswordAcquisitionFailed`: If the password could not be read.

    Examples:
    --------
    | ${key}= | Load Encrypted Private Key | ${der_data} | password=11111 |
    | ${key}= | Load Encrypted Private Key | ${der_data} |

    """
    plaintext = decrypt_encrypted_private_key(der, password=password, prompt=prompt)
    return materialize_private_key(plaintext)


@keyword(name="Load Encrypted Private Key From File")
def load_encrypted_private_key_from_file(  # noqa: D417 for RF docs
    filepath: str,
    password: Optional[Password] = None,
    prompt: str = DEFAULT_PROMPT,
) -> PrivateKey:
    """Load a PBES2 encrypted PKCS#8 private key from a DER or PEM file.

    Arguments:
    ---------
        - `filepath`: The path to the file. PEM files must use the "ENCRYPTED PRIVATE KEY" label.
        - `password`: The password. If `None` or empty, the password is prompted for on the terminal.
        - `prompt`: The prompt text. Defaults to "key password: ".

    Returns:
    -------
        - The loaded private key.

    Raises:
    ------
        - `FileNotFoundError` if the file does not exist.
        - The same exceptions as `Load Encrypted Private Key`.

    Examples:
    --------
    | ${key}= | Load Encrypted Private Key From File | data/keys/enc_rsa_key.pem | password=11111 |

    """
    der = utils.load_der_or_pem_file(filepath)
    return load_encrypted_private_key(der, password=password, prompt=prompt)
