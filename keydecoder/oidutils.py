"""Defines Object Identifiers (OIDs) and mappings for decoding encrypted private keys."""

# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

from typing import Dict

from pyasn1.type import univ
from pyasn1_alt_modules import rfc8018, rfc9481

pkcs_5 = "1.2.840.113549.1.5"

id_PBES2 = rfc8018.id_PBES2
id_PBKDF2 = rfc8018.id_PBKDF2
id_scrypt = univ.ObjectIdentifier("1.3.6.1.4.1.11591.4.11")

# PBES1 schemes are recognised by name only, so that the error message can say what was found.
PBES1_OID_2_NAME: Dict[univ.ObjectIdentifier, str] = {
    univ.ObjectIdentifier(f"{pkcs_5}.1"): "pbeWithMD2AndDES-CBC",
    univ.ObjectIdentifier(f"{pkcs_5}.3"): "pbeWithMD5AndDES-CBC",
    univ.ObjectIdentifier(f"{pkcs_5}.4"): "pbeWithMD2AndRC2-CBC",
    univ.ObjectIdentifier(f"{pkcs_5}.6"): "pbeWithMD5AndRC2-CBC",
    univ.ObjectIdentifier(f"{pkcs_5}.10"): "pbeWithSHA1AndDES-CBC",
    univ.ObjectIdentifier(f"{pkcs_5}.11"): "pbeWithSHA1AndRC2-CBC",
}

KDF_OID_2_NAME: Dict[univ.ObjectIdentifier, str] = {
    id_PBKDF2: "pbkdf2",
    id_scrypt: "scrypt",
}

# The PRF choices of PBKDF2 (RFC 8018 Appendix B.1).
PBKDF2_PRF_OID_2_NAME: Dict[univ.ObjectIdentifier, str] = {
    rfc8018.id_hmacWithSHA1: "hmac-sha1",
    rfc9481.id_hmacWithSHA224: "hmac-sha224",
    rfc9481.id_hmacWithSHA256: "hmac-sha256",
    rfc9481.id_hmacWithSHA384: "hmac-sha384",
    rfc9481.id_hmacWithSHA512: "hmac-sha512",
}

AES_CBC_OID_2_NAME: Dict[univ.ObjectIdentifier, str] = {
    rfc9481.id_aes128_CBC: "aes128_cbc",
    rfc9481.id_aes192_CBC: "aes192_cbc",
    rfc9481.id_aes256_CBC: "aes256_cbc",
}

LEGACY_CIPHER_OID_2_NAME: Dict[univ.ObjectIdentifier, str] = {
    univ.ObjectIdentifier("1.3.14.3.2.7"): "des-cbc",
    univ.ObjectIdentifier("1.2.840.113549.3.7"): "des-ede3-cbc",
    univ.ObjectIdentifier("1.2.840.113549.3.2"): "rc2-cbc",
}

ALL_KNOWN_OIDS_2_NAME: Dict[univ.ObjectIdentifier, str] = {id_PBES2: "pbes2"}
ALL_KNOWN_OIDS_2_NAME.update(PBES1_OID_2_NAME)
ALL_KNOWN_OIDS_2_NAME.update(KDF_OID_2_NAME)
ALL_KNOWN_OIDS_2_NAME.update(PBKDF2_PRF_OID_2_NAME)
ALL_KNOWN_OIDS_2_NAME.update(AES_CBC_OID_2_NAME)
ALL_KNOWN_OIDS_2_NAME.update(LEGACY_CIPHER_OID_2_NAME)


def may_return_oid_to_name(oid: univ.ObjectIdentifier) -> str:
    """Check if the oid is Known and then returns a human-readable representation, or the dotted string.

    :param oid: The OID to perform the lookup for.
    :return: Either a human-readable name or the OID as dotted string.
    """
    return ALL_KNOWN_OIDS_2_NAME.get(univ.ObjectIdentifier(oid), str(oid))
