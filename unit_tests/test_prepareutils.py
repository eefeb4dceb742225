# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

import unittest

from cryptography.hazmat.primitives import hashes

from keydecoder.asn1utils import decode_envelope, decode_pbes2_params, decode_pbkdf2_params
from keydecoder.exceptions import BadConfig
from keydecoder.keyenums import CipherAlgorithm, HashAlgorithm
from keydecoder.prepareutils import encrypt_private_key, prepare_cbc_alg_id, prepare_pbkdf2_alg_id


class TestKeyEnums(unittest.TestCase):
    def test_hash_algorithm_get(self):
        self.assertEqual(HashAlgorithm.get("SHA256"), HashAlgorithm.SHA256)
        self.assertEqual(HashAlgorithm.get("hmac-sha224"), HashAlgorithm.SHA224)
        self.assertEqual(HashAlgorithm.get("sha-1"), HashAlgorithm.SHA1)
        self.assertIsInstance(HashAlgorithm.SHA224.hash_instance(), hashes.SHA224)
        with self.assertRaises(BadConfig):
            HashAlgorithm.get("sha512")

    def test_cipher_algorithm_get(self):
        self.assertEqual(CipherAlgorithm.get("AES-256-CBC"), CipherAlgorithm.AES256_CBC)
        self.assertEqual(CipherAlgorithm.get("aes128_cbc"), CipherAlgorithm.AES128_CBC)
        self.assertEqual(CipherAlgorithm.AES128_CBC.key_size, 16)
        with self.assertRaises(BadConfig):
            CipherAlgorithm.get("aes192_cbc")


class TestPrepareUtils(unittest.TestCase):
    def test_prepare_unknown_names(self):
        """
        GIVEN a hash algorithm and a cipher name without known OID.
        WHEN the algorithm identifiers are prepared,
        THEN a BadConfig exception should be raised.
        """
        with self.assertRaises(BadConfig):
            prepare_pbkdf2_alg_id(salt=b"salt", hash_alg="md5")
        with self.assertRaises(BadConfig):
            prepare_cbc_alg_id("chacha20")

    def test_encrypt_private_key_rejects_unsupported_algorithms(self):
        """
        GIVEN a cipher or hash algorithm which cannot be decrypted again.
        WHEN encrypt_private_key is called,
        THEN a BadConfig exception should be raised.
        """
        with self.assertRaises(BadConfig):
            encrypt_private_key(b"\x30\x00", "11111", cipher="aes192_cbc")
        with self.assertRaises(BadConfig):
            encrypt_private_key(b"\x30\x00", "11111", hash_alg="sha512")

    def test_encrypt_private_key_parameters(self):
        """
        GIVEN a fixed salt and iteration count.
        WHEN encrypt_private_key is called with DER data,
        THEN the encoded PBKDF2 parameters should carry them.
        """
        der_data = encrypt_private_key(b"\x30\x00", "11111", iterations=3000, salt="0x00112233445566778899")
        envelope = decode_envelope(der_data)
        pbes2_params = decode_pbes2_params(envelope.algorithm_identifier.parameters)
        kdf_params = decode_pbkdf2_params(pbes2_params.key_derivation_func.parameters)
        self.assertEqual(kdf_params.salt, bytes.fromhex("00112233445566778899"))
        self.assertEqual(kdf_params.iteration_count, 3000)
        self.assertEqual(len(envelope.encrypted_payload), 16)


if __name__ == "__main__":
    unittest.main()
