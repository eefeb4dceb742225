# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Decode the nested DER structures of a PBES2 encrypted private key.

The outer `EncryptedPrivateKeyInfo` (RFC 5958) is decoded first. The nested parameter
structures (`PBES2-params`, `PBKDF2-params`, the AES IV) are only decoded by the caller
after the algorithm owning them was accepted, so parameters of unsupported algorithms
are never parsed.
"""

import logging
from typing import Optional, Tuple

import pyasn1.error
from pyasn1.codec.der import decoder, encoder
from pyasn1.type import base
from pyasn1_alt_modules import rfc5280, rfc5958, rfc8018
from robot.api.deco import not_keyword

from keydecoder.data_objects import AlgorithmIdentifier, EncryptedKeyEnvelope, Pbes2Parameters, Pbkdf2Parameters
from keydecoder.exceptions import BadAsn1Data, BadSalt

AES_IV_SIZE = 16


@not_keyword
def try_decode_pyasn1(data: bytes, asn1_spec: base.Asn1Item) -> Tuple[base.Asn1Item, bytes]:
    """Decode DER data into the given pyasn1 schema.

    :param data: The DER-encoded data.
    :param asn1_spec: The schema instance to decode into.
    :return: The decoded object and the remaining bytes.
    :raises BadAsn1Data: If the data does not match the schema.
    """
    name = type(asn1_spec).__name__
    try:
        return decoder.decode(data, asn1Spec=asn1_spec)
    except pyasn1.error.PyAsn1Error as err:
        raise BadAsn1Data(f"The `{name}` structure was not valid.", overwrite=True, error_details=str(err)) from err


def _decode_exact(data: bytes, asn1_spec: base.Asn1Item) -> base.Asn1Item:
    """Decode `data` and reject any trailing bytes."""
    obj, rest = try_decode_pyasn1(data, asn1_spec)
    if rest:
        raise BadAsn1Data(type(asn1_spec).__name__, remainder=bytes(rest))
    return obj


def _to_alg_id(alg_id: rfc5280.AlgorithmIdentifier) -> AlgorithmIdentifier:
    """Convert a decoded pyasn1 `AlgorithmIdentifier` into the dataclass, keeping the parameters as DER."""
    params = alg_id["parameters"]
    return AlgorithmIdentifier(
        oid=alg_id["algorithm"],
        parameters=encoder.encode(params) if params.isValue else None,
    )


def _require_parameters(parameters: Optional[bytes], structure: str) -> bytes:
    if parameters is None:
        raise BadAsn1Data(f"The `{structure}` parameters are absent.", overwrite=True)
    return parameters


def decode_envelope(der: bytes) -> EncryptedKeyEnvelope:
    """Decode a DER-encoded `EncryptedPrivateKeyInfo` structure.

    :param der: The DER-encoded structure.
    :return: The algorithm identifier and the encrypted payload.
    :raises BadAsn1Data: If the data is not a valid `EncryptedPrivateKeyInfo` or has trailing data.
    """
    enc_key_info = _decode_exact(der, rfc5958.EncryptedPrivateKeyInfo())
    envelope = EncryptedKeyEnvelope(
        algorithm_identifier=_to_alg_id(enc_key_info["encryptionAlgorithm"]),
        encrypted_payload=enc_key_info["encryptedData"].asOctets(),
    )
    logging.debug("Decoded EncryptedPrivateKeyInfo with %d encrypted bytes.", len(envelope.encrypted_payload))
    return envelope


def decode_pbes2_params(parameters: Optional[bytes]) -> Pbes2Parameters:
    """Decode the `PBES2-params` of an already accepted PBES2 algorithm identifier.

    :param parameters: The DER-encoded parameters of the PBES2 algorithm identifier.
    :return: The key derivation function and the encryption scheme.
    :raises BadAsn1Data: If the parameters are absent or invalid.
    """
    params = _decode_exact(_require_parameters(parameters, "PBES2-params"), rfc8018.PBES2_params())
    return Pbes2Parameters(
        key_derivation_func=_to_alg_id(params["keyDerivationFunc"]),
        encryption_scheme=_to_alg_id(params["encryptionScheme"]),
    )


def decode_pbkdf2_params(parameters: Optional[bytes]) -> Pbkdf2Parameters:
    """Decode the `PBKDF2-params` of an already accepted PBKDF2 algorithm identifier.

    Only the inlined salt is supported. An absent PRF is the RFC 8018 default, hmacWithSHA1.

    :param parameters: The DER-encoded parameters of the PBKDF2 algorithm identifier.
    :return: The decoded parameters.
    :raises BadAsn1Data: If the parameters are absent or invalid.
    :raises BadSalt: If the salt is given as `otherSource`.
    """
    params = _decode_exact(_require_parameters(parameters, "PBKDF2-params"), rfc8018.PBKDF2_params())

    if params["salt"].getName() != "specified":
        raise BadSalt()

    # An absent `prf` is filled in with the hmacWithSHA1 default by the decoder.
    prf_alg_id = _to_alg_id(params["prf"])

    iteration_count = int(params["iterationCount"])
    if iteration_count < 1:
        raise BadAsn1Data(f"The PBKDF2 iteration count must be positive, got {iteration_count}.", overwrite=True)

    key_length = int(params["keyLength"]) if params["keyLength"].isValue else None

    return Pbkdf2Parameters(
        salt=params["salt"]["specified"].asOctets(),
        iteration_count=iteration_count,
        prf=prf_alg_id,
        key_length=key_length,
    )


def decode_iv(parameters: Optional[bytes]) -> bytes:
    """Decode the AES-CBC IV from the parameters of the encryption scheme.

    :param parameters: The DER-encoded OCTET STRING holding the IV.
    :return: The IV.
    :raises BadAsn1Data: If the parameters are absent, invalid or the IV is not 16 bytes long.
    """
    if parameters is None:
        raise BadAsn1Data("The `AES-IV` parameters are absent.", overwrite=True)

    # `AES_IV` is size constrained, so a wrong length already fails while decoding.
    iv = _decode_exact(parameters, rfc8018.AES_IV()).asOctets()
    if len(iv) != AES_IV_SIZE:
        raise BadAsn1Data(f"The AES-CBC IV must be {AES_IV_SIZE} bytes long, got {len(iv)}.", overwrite=True)
    return iv
