# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Functions for the password-based key derivation and the AES-CBC decryption of PBES2.

Provided primitives are: PBKDF2 key derivation, AES-CBC encryption and decryption and
PKCS#7 padding. The module leverages the `cryptography` library for all primitives.
"""

import logging

from cryptography.hazmat.primitives import constant_time
from cryptography.hazmat.primitives import padding as aes_padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from robot.api.deco import not_keyword

from keydecoder.data_objects import Pbkdf2Parameters, ResolvedCipherSpec
from keydecoder.exceptions import BadAsn1Data, InvalidPadding
from keydecoder.keyenums import HashAlgorithm

AES_BLOCK_SIZE = 16

# Below this count a warning is logged. The count is never enforced.
LOW_ITERATION_COUNT = 1000


@not_keyword
def compute_pbkdf2(password: bytes, salt: bytes, iterations: int, key_length: int, hash_alg: HashAlgorithm) -> bytes:
    """Derive a key with PBKDF2 using HMAC with the given hash algorithm.

    :param password: The password.
    :param salt: The salt, as decoded.
    :param iterations: The iteration count, as decoded.
    :param key_length: The length of the key to derive in bytes.
    :param hash_alg: The hash algorithm of the HMAC PRF.
    :return: The derived key.
    """
    if iterations < LOW_ITERATION_COUNT:
        logging.warning("PBKDF2 iteration count is low: %d (< %d).", iterations, LOW_ITERATION_COUNT)

    kdf = PBKDF2HMAC(
        algorithm=hash_alg.hash_instance(),
        length=key_length,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password)


def _check_block_aligned(data: bytes) -> None:
    if len(data) == 0 or len(data) % AES_BLOCK_SIZE != 0:
        raise BadAsn1Data(
            f"The encrypted data must be a non-zero multiple of {AES_BLOCK_SIZE} bytes, got {len(data)}.",
            overwrite=True,
        )


@not_keyword
def compute_aes_cbc_decrypt(key: bytes, data: bytes, iv: bytes) -> bytes:
    """Decrypt data with AES in CBC mode, without removing the padding.

    :param key: The AES key (16 or 32 bytes).
    :param data: The ciphertext.
    :param iv: The 16-byte initialization vector.
    :return: The decrypted data, still padded.
    :raises ValueError: If the IV is not 16 bytes long.
    :raises BadAsn1Data: If the ciphertext is empty or not a multiple of the block size.
    """
    if len(iv) != AES_BLOCK_SIZE:
        raise ValueError("IV must be 16 bytes long for AES-CBC.")
    _check_block_aligned(data)

    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    return decryptor.update(data) + decryptor.finalize()


@not_keyword
def compute_aes_cbc_encrypt(key: bytes, data: bytes, iv: bytes) -> bytes:
    """Pad the data with PKCS#7 and encrypt it with AES in CBC mode.

    :param key: The AES key (16 or 32 bytes).
    :param data: The plaintext.
    :param iv: The 16-byte initialization vector.
    :return: The ciphertext.
    """
    if len(iv) != AES_BLOCK_SIZE:
        raise ValueError("IV must be 16 bytes long for AES-CBC.")

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(pad_pkcs7(data)) + encryptor.finalize()


@not_keyword
def pad_pkcs7(data: bytes) -> bytes:
    """Append PKCS#7 padding for the AES block size, always adding between 1 and 16 bytes."""
    padder = aes_padding.PKCS7(algorithms.AES.block_size).padder()  # type: ignore
    return padder.update(data) + padder.finalize()


@not_keyword
def check_pkcs7_padding(buf: bytes) -> bytes:
    """Verify that the PKCS#7 padding of the decrypted data is correct and remove it.

    The padded tail is compared in constant time.

    :param buf: The decrypted data.
    :return: The data without the padding.
    :raises InvalidPadding: If the buffer is shorter than one block or the padding is invalid.
    """
    if len(buf) < AES_BLOCK_SIZE:
        raise InvalidPadding()

    pad_len = buf[-1]
    if pad_len < 1 or pad_len > AES_BLOCK_SIZE:
        raise InvalidPadding()

    if pad_len > len(buf):
        raise InvalidPadding()

    if not constant_time.bytes_eq(buf[-pad_len:], bytes([pad_len]) * pad_len):
        raise InvalidPadding()

    return buf[:-pad_len]


@not_keyword
def decrypt_pbes2(
    params: Pbkdf2Parameters,
    cipher_spec: ResolvedCipherSpec,
    hash_alg: HashAlgorithm,
    ciphertext: bytes,
    password: bytes,
) -> bytes:
    """Derive the key with PBKDF2, decrypt with AES-CBC and strip the PKCS#7 padding.

    :param params: The decoded PBKDF2 parameters.
    :param cipher_spec: The resolved cipher and its IV.
    :param hash_alg: The hash algorithm of the PBKDF2 PRF.
    :param ciphertext: The encrypted data.
    :param password: The password.
    :return: The decrypted, unpadded plaintext.
    :raises BadAsn1Data: If the encoded `keyLength` does not match the cipher or the ciphertext is not aligned.
    :raises InvalidPadding: If the padding is invalid, usually because of a wrong password.
    """
    if params.key_length is not None and params.key_length != cipher_spec.key_size:
        raise BadAsn1Data(
            f"PBKDF2 keyLength {params.key_length} does not match {cipher_spec.cipher.value} "
            f"(expected {cipher_spec.key_size}).",
            overwrite=True,
        )
    _check_block_aligned(ciphertext)

    logging.info(
        "Deriving a %d-byte key with PBKDF2-HMAC-%s and %d iterations.",
        cipher_spec.key_size,
        hash_alg.value.upper(),
        params.iteration_count,
    )
    derived_key = compute_pbkdf2(
        password=password,
        salt=params.salt,
        iterations=params.iteration_count,
        key_length=cipher_spec.key_size,
        hash_alg=hash_alg,
    )
    plaintext = compute_aes_cbc_decrypt(key=derived_key, data=ciphertext, iv=cipher_spec.iv)
    return check_pkcs7_padding(plaintext)
