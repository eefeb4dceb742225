# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Contains Custom Exceptions for decoding encrypted private keys."""

from typing import List, Optional, Union

from pyasn1.type import univ

from keydecoder.oidutils import may_return_oid_to_name


class KeyDecoderError(Exception):
    """Base class for all errors raised while decoding an encrypted private key."""

    error_details: List[str]

    def __init__(self, message: str, error_details: Optional[Union[List[str], str]] = None):
        """Initialize the exception with the message.

        :param message: The message to display.
        :param error_details: Additional details about the error.
        """
        self.message = message
        self.error_details = []
        if isinstance(error_details, str):
            self.error_details = [error_details]
        elif error_details is not None:
            self.error_details = list(error_details)
        super().__init__(message)

    def get_error_details(self) -> List[str]:
        """Return the error details."""
        return self.error_details


class BadConfig(KeyDecoderError):
    """Raised when the configuration is invalid."""


class BadAsn1Data(KeyDecoderError):
    """Raised when the ASN.1 data has a remainder or ASN.1 data is incorrectly populated."""

    def __init__(
        self,
        message: str,
        remainder: Optional[bytes] = None,
        overwrite: bool = False,
        error_details: Optional[Union[List[str], str]] = None,
    ):
        """Initialize the exception with the message.

        :param message: The message to display or just the structure name.
        :param remainder: The remainder of the ASN.1 data.
        :param overwrite: Raise the exception with the message only.
        """
        if overwrite:
            super().__init__(message=message, error_details=error_details)
        else:
            r = "" if remainder is None else remainder.hex()
            super().__init__(f"Decoding the `{message}` structure had a remainder: {r}.", error_details=error_details)


class BadSalt(BadAsn1Data):
    """Raised when the PBKDF2 salt is not given as an inlined octet string."""

    def __init__(self, message: str = "PBKDF2 salt must be given as `specified` OCTET STRING."):
        """Initialize the exception with the message."""
        super().__init__(message, overwrite=True)


class UnsupportedAlgorithm(KeyDecoderError):
    """Raised when a known structure names an algorithm outside the supported set."""

    def __init__(self, oid: univ.ObjectIdentifier, extra_info: str = ""):
        """Initialize the exception with the OID and extra information.

        :param oid: The OID that is not supported.
        :param extra_info: Where the OID was found, e.g. "PBKDF2 PRF".
        """
        oid_name = may_return_oid_to_name(oid)
        self.oid = oid
        message = f"Unsupported algorithm: {oid_name}:{oid}"
        if extra_info:
            message += f" ({extra_info})"
        super().__init__(message)


class InvalidPadding(KeyDecoderError):
    """Raised when the decrypted data does not carry valid PKCS#7 padding.

    Usually caused by a wrong password, but corrupted data gives the same result.
    """

    def __init__(self, message: str = "Invalid padded buffer (wrong password or corrupted data)."):
        """Initialize the exception with the message."""
        super().__init__(message)


class InvalidKeyData(KeyDecoderError):
    """Raised when the decrypted data cannot be loaded as a private key."""


class PasswordAcquisitionFailed(KeyDecoderError):
    """Raised when the password could not be read from the terminal."""
