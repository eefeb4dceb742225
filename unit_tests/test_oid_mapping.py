# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

import unittest
from unittest.mock import patch

from pyasn1.codec.der import encoder
from pyasn1.type import univ
from pyasn1_alt_modules import rfc8018, rfc9481

from keydecoder import oid_mapping
from keydecoder.data_objects import AlgorithmIdentifier
from keydecoder.exceptions import BadAsn1Data, UnsupportedAlgorithm
from keydecoder.keyenums import CipherAlgorithm, HashAlgorithm
from keydecoder.oidutils import id_PBES2, id_PBKDF2, id_scrypt
from unit_tests.utils_for_test import IV


class TestOidMapping(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.iv_params = encoder.encode(univ.OctetString(IV))

    def test_resolve_wrapper(self):
        """
        GIVEN the PBES2 OID and a PBES1 OID.
        WHEN resolve_wrapper is called,
        THEN PBES2 should be accepted and PBES1 rejected with its name in the message.
        """
        oid_mapping.resolve_wrapper(AlgorithmIdentifier(oid=id_PBES2))
        pbes1 = univ.ObjectIdentifier("1.2.840.113549.1.5.3")
        with self.assertRaises(UnsupportedAlgorithm) as context:
            oid_mapping.resolve_wrapper(AlgorithmIdentifier(oid=pbes1))
        self.assertEqual(context.exception.oid, pbes1)
        self.assertIn("pbeWithMD5AndDES-CBC", str(context.exception))

    def test_resolve_kdf(self):
        """
        GIVEN the PBKDF2 OID and the scrypt OID.
        WHEN resolve_kdf is called,
        THEN PBKDF2 should be accepted and scrypt rejected.
        """
        oid_mapping.resolve_kdf(AlgorithmIdentifier(oid=id_PBKDF2))
        with self.assertRaises(UnsupportedAlgorithm) as context:
            oid_mapping.resolve_kdf(AlgorithmIdentifier(oid=id_scrypt))
        self.assertIn("scrypt", str(context.exception))

    def test_resolve_prf(self):
        """
        GIVEN the OIDs of HMAC with SHA-1, SHA-224 and SHA-256.
        WHEN resolve_prf is called,
        THEN the matching hash algorithm should be returned.
        """
        cases = [
            (rfc8018.id_hmacWithSHA1, HashAlgorithm.SHA1),
            (rfc9481.id_hmacWithSHA224, HashAlgorithm.SHA224),
            (rfc9481.id_hmacWithSHA256, HashAlgorithm.SHA256),
        ]
        for oid, expected in cases:
            with self.subTest(oid=str(oid)):
                self.assertEqual(oid_mapping.resolve_prf(AlgorithmIdentifier(oid=oid)), expected)

    def test_resolve_prf_unsupported(self):
        """
        GIVEN the OIDs of HMAC with SHA-384 and SHA-512.
        WHEN resolve_prf is called,
        THEN an UnsupportedAlgorithm exception should be raised.
        """
        for oid in [rfc9481.id_hmacWithSHA384, rfc9481.id_hmacWithSHA512]:
            with self.subTest(oid=str(oid)):
                with self.assertRaises(UnsupportedAlgorithm):
                    oid_mapping.resolve_prf(AlgorithmIdentifier(oid=oid))

    def test_resolve_cipher(self):
        """
        GIVEN the AES-128-CBC and AES-256-CBC OIDs with a valid IV.
        WHEN resolve_cipher is called,
        THEN the cipher, the IV and the key size should be returned.
        """
        cases = [
            (rfc9481.id_aes128_CBC, CipherAlgorithm.AES128_CBC, 16),
            (rfc9481.id_aes256_CBC, CipherAlgorithm.AES256_CBC, 32),
        ]
        for oid, cipher, key_size in cases:
            with self.subTest(cipher=cipher):
                spec = oid_mapping.resolve_cipher(AlgorithmIdentifier(oid=oid, parameters=self.iv_params))
                self.assertEqual(spec.cipher, cipher)
                self.assertEqual(spec.iv, IV)
                self.assertEqual(spec.key_size, key_size)

    def test_resolve_cipher_unsupported_does_not_decode_parameters(self):
        """
        GIVEN the AES-192-CBC and DES-CBC OIDs with parameters that are not a valid IV.
        WHEN resolve_cipher is called,
        THEN an UnsupportedAlgorithm exception should be raised without decoding the parameters.
        """
        for oid in [rfc9481.id_aes192_CBC, univ.ObjectIdentifier("1.3.14.3.2.7")]:
            with self.subTest(oid=str(oid)):
                with patch.object(oid_mapping, "decode_iv") as mocked:
                    with self.assertRaises(UnsupportedAlgorithm):
                        oid_mapping.resolve_cipher(AlgorithmIdentifier(oid=oid, parameters=b"\xff\x00"))
                mocked.assert_not_called()

    def test_resolve_cipher_bad_iv(self):
        """
        GIVEN the AES-256-CBC OID with an IV of 15 bytes.
        WHEN resolve_cipher is called,
        THEN a BadAsn1Data exception should be raised.
        """
        params = encoder.encode(univ.OctetString(IV[:15]))
        with self.assertRaises(BadAsn1Data):
            oid_mapping.resolve_cipher(AlgorithmIdentifier(oid=rfc9481.id_aes256_CBC, parameters=params))

    def test_cipher_oid_mapping_is_bijective(self):
        """
        GIVEN the cipher mapping.
        WHEN the reverse mapping is looked up,
        THEN every algorithm should map back to its OID.
        """
        for oid, cipher in oid_mapping.CIPHER_OID_2_ALG.items():
            self.assertEqual(oid_mapping.CIPHER_ALG_2_OID[cipher], oid)


if __name__ == "__main__":
    unittest.main()
