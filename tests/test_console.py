"""Tests for console prompts."""

import io
from unittest.mock import patch

import pytest

from coffer.console import Console


class TestConfirm:
    """Tests for Console.confirm."""

    @pytest.mark.parametrize("answer", ["y\n", "Y\n", " y \n", "y", "y please\n", "Y\tok\n"])
    def test_confirm_yes(self, make_console, answer):
        console = make_console(answers=answer)
        assert console.confirm("Continue? [y/N] ") is True

    @pytest.mark.parametrize("answer", ["n\n", "\n", "", "yes\n", "N\n", "n y\n"])
    def test_confirm_anything_else_is_no(self, make_console, answer):
        console = make_console(answers=answer)
        assert console.confirm("Continue? [y/N] ") is False

    def test_confirm_writes_prompt_without_newline(self, make_console):
        console = make_console(answers="y\n")
        console.confirm("Continue? [y/N] ")
        assert console.stdout.getvalue() == "Continue? [y/N] "


class TestOutput:
    """Tests for echo and error."""

    def test_echo_and_error_streams(self, make_console):
        console = make_console()
        console.echo("hello")
        console.error("oops")
        assert console.stdout.getvalue() == "hello\n"
        assert console.stderr.getvalue() == "oops\n"


class TestAskSecret:
    """Tests for hidden input."""

    @patch("coffer.console.getpass.getpass")
    def test_defaults_to_getpass(self, mock_getpass):
        mock_getpass.return_value = "hunter2"
        console = Console(stdin=io.StringIO(), stdout=io.StringIO())

        assert console.ask_secret("Type the new secret:") == "hunter2"
        mock_getpass.assert_called_once_with("Type the new secret:")
