# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Obtain the password for an encrypted private key.

An explicitly given password always wins. Only if none was given, the user is prompted
on the terminal with echo disabled. The password is never logged.
"""

import getpass
import logging
import warnings
from typing import Optional, Union

from robot.api.deco import not_keyword

from keydecoder.exceptions import PasswordAcquisitionFailed

DEFAULT_PROMPT = "key password: "


def _password_to_bytes(password: Union[str, bytes]) -> bytes:
    # No "0x" hex convention here, the value is used exactly as given.
    if isinstance(password, bytes):
        return password
    return password.encode("utf-8")


@not_keyword
def acquire_password(password: Optional[Union[str, bytes]] = None, prompt: str = DEFAULT_PROMPT) -> bytes:
    """Return the password for decrypting a key.

    :param password: The password to use. If it is non-empty, it is returned verbatim (`str` as UTF-8)
    and no prompt happens.
    :param prompt: The text shown when prompting. Defaults to "key password: ".
    :return: The password as bytes.
    :raises PasswordAcquisitionFailed: If the password could not be read from the terminal.
    """
    if password:
        logging.debug("Using the given password.")
        return _password_to_bytes(password)

    try:
        # Without a terminal `getpass` only warns and reads from stdin with echo on.
        with warnings.catch_warnings():
            warnings.simplefilter("error", getpass.GetPassWarning)
            entered = getpass.getpass(prompt)
    except (EOFError, OSError, getpass.GetPassWarning) as err:
        raise PasswordAcquisitionFailed("Could not read the key password from the terminal.") from err

    return _password_to_bytes(entered)
