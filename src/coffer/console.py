#!/usr/bin/env python3
"""Console - Terminal input/output used by the coffer commands.

Swappable so prompts can be driven from canned input in tests.
"""

import getpass
import sys


class Console:
    """Prompts and printing for one command invocation."""

    def __init__(self, stdin=None, stdout=None, stderr=None, read_secret=None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self._read_secret = read_secret or getpass.getpass

    def echo(self, message="", end="\n"):
        print(message, end=end, file=self.stdout)

    def error(self, message):
        print(message, file=self.stderr)

    def ask_secret(self, prompt):
        """Read a secret without echoing it."""
        return self._read_secret(prompt)

    def confirm(self, prompt):
        """Ask a [y/N] question. Only a first word of "y" (any case) counts as yes."""
        self.echo(prompt, end="")
        self.stdout.flush()
        answer = self.stdin.readline()
        return answer.lower().split()[:1] == ["y"]
