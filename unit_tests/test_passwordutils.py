# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

import getpass
import unittest
import warnings
from unittest.mock import patch

from keydecoder.exceptions import PasswordAcquisitionFailed
from keydecoder.passwordutils import DEFAULT_PROMPT, acquire_password


class TestAcquirePassword(unittest.TestCase):
    @patch("keydecoder.passwordutils.getpass.getpass")
    def test_explicit_password_wins(self, mock_getpass):
        """
        GIVEN an explicitly given password.
        WHEN acquire_password is called,
        THEN the password should be returned as UTF-8 bytes and no prompt should happen.
        """
        self.assertEqual(acquire_password("11111"), b"11111")
        self.assertEqual(acquire_password("pässwort"), "pässwort".encode("utf-8"))
        mock_getpass.assert_not_called()

    @patch("keydecoder.passwordutils.getpass.getpass")
    def test_explicit_password_is_used_verbatim(self, mock_getpass):
        """
        GIVEN passwords with surrounding whitespace, raw bytes or a "0x" prefix.
        WHEN acquire_password is called,
        THEN the password should be returned unchanged.
        """
        self.assertEqual(acquire_password(" secret \n"), b" secret \n")
        self.assertEqual(acquire_password(b"\x00\xffraw"), b"\x00\xffraw")
        self.assertEqual(acquire_password("0x4142"), b"0x4142")
        mock_getpass.assert_not_called()

    @patch("keydecoder.passwordutils.getpass.getpass", return_value="typed")
    def test_prompt_without_password(self, mock_getpass):
        """
        GIVEN no password or an empty password.
        WHEN acquire_password is called,
        THEN the user should be prompted with the default prompt.
        """
        for password in [None, "", b""]:
            with self.subTest(password=password):
                mock_getpass.reset_mock()
                self.assertEqual(acquire_password(password), b"typed")
                mock_getpass.assert_called_once_with(DEFAULT_PROMPT)

    @patch("keydecoder.passwordutils.getpass.getpass", return_value="typed")
    def test_custom_prompt(self, mock_getpass):
        """
        GIVEN a custom prompt text.
        WHEN acquire_password is called without a password,
        THEN the custom prompt should be shown.
        """
        acquire_password(prompt="Enter pass phrase: ")
        mock_getpass.assert_called_once_with("Enter pass phrase: ")

    @patch("keydecoder.passwordutils.getpass.getpass", return_value="")
    def test_empty_entered_password(self, mock_getpass):
        """
        GIVEN the user enters an empty line.
        WHEN acquire_password is called,
        THEN an empty password should be returned.
        """
        self.assertEqual(acquire_password(), b"")
        mock_getpass.assert_called_once()

    def test_prompt_fails(self):
        """
        GIVEN a terminal which cannot be read.
        WHEN acquire_password is called without a password,
        THEN a PasswordAcquisitionFailed exception should be raised.
        """
        for error in [EOFError(), OSError("no tty")]:
            with self.subTest(error=type(error).__name__):
                with patch("keydecoder.passwordutils.getpass.getpass", side_effect=error):
                    with self.assertRaises(PasswordAcquisitionFailed):
                        acquire_password()

    def test_prompt_without_terminal(self):
        """
        GIVEN no controlling terminal, so that `getpass` can only warn and read from stdin with echo on.
        WHEN acquire_password is called without a password,
        THEN a PasswordAcquisitionFailed exception should be raised instead of reading the echoed input.
        """

        def _getpass_without_terminal(prompt):
            warnings.warn("Can not control echo on the terminal.", getpass.GetPassWarning, stacklevel=2)
            return "piped-secret"

        with patch("keydecoder.passwordutils.getpass.getpass", side_effect=_getpass_without_terminal):
            with self.assertRaises(PasswordAcquisitionFailed) as context:
                acquire_password()
        self.assertNotIn("piped-secret", str(context.exception))

    @patch("keydecoder.passwordutils.getpass.getpass", return_value="typed-secret")
    def test_password_is_not_logged(self, _):
        """
        GIVEN an explicit and a prompted password.
        WHEN acquire_password is called with debug logging,
        THEN the password should never appear in the log output.
        """
        with self.assertLogs(level="DEBUG") as logs:
            acquire_password("given-secret")
            acquire_password()
        output = "\n".join(logs.output)
        self.assertNotIn("given-secret", output)
        self.assertNotIn("typed-secret", output)


if __name__ == "__main__":
    unittest.main()
