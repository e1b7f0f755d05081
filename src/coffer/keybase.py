#!/usr/bin/env python3
"""Keybase gateway - All interaction with the external keybase executable.

Coffer never encrypts anything itself. It shells out to keybase for:

    keybase status
    keybase encrypt <recipient> --message <plaintext> --output <path>
    keybase decrypt <path> --output <outpath>
"""

import json
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from .errors import (
    DecryptionFailed,
    EncryptionFailed,
    GatewayUnavailable,
    IdentityUnavailable,
)

DEFAULT_EXECUTABLE = "keybase"

PathLike = Union[str, Path]


@dataclass
class KeybaseStatus:
    """The parts of `keybase status` coffer cares about."""

    configured: bool
    logged_in: bool
    name: str

    @classmethod
    def from_json(cls, data: str) -> "KeybaseStatus":
        """Parse the JSON status report.

        Raises:
            IdentityUnavailable: If the report is not a JSON object

        """
        try:
            obj = json.loads(data)
        except json.JSONDecodeError as e:
            raise IdentityUnavailable(f"Could not parse keybase status: {e}") from e

        if not isinstance(obj, dict):
            raise IdentityUnavailable("Could not parse keybase status: expected a JSON object")

        status = obj.get("status") or {}
        user = obj.get("user") or {}
        if not isinstance(status, dict) or not isinstance(user, dict):
            raise IdentityUnavailable("Could not parse keybase status: unexpected report layout")

        name = user.get("name") or ""
        if not isinstance(name, str):
            raise IdentityUnavailable("Could not parse keybase status: user name is not a string")

        return cls(
            configured=bool(status.get("configured", False)),
            logged_in=bool(status.get("logged_in", False)),
            name=name,
        )


class KeybaseGateway:
    """Runs the keybase executable and translates its failures."""

    def __init__(self, executable: str = DEFAULT_EXECUTABLE):
        self.executable = executable

    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        # OSError covers a missing or non-executable binary
        return subprocess.run([self.executable] + args, capture_output=True)

    def status(self) -> KeybaseStatus:
        """Query keybase for the current session."""
        try:
            proc = self._run(["status"])
        except OSError as e:
            raise GatewayUnavailable(f"Could not run {self.executable}: {e}") from e

        if proc.returncode != 0:
            raise GatewayUnavailable(
                f"`{self.executable} status` exited with status {proc.returncode}"
            )

        return KeybaseStatus.from_json(proc.stdout.decode("utf-8", errors="replace"))

    def current_identity_name(self) -> str:
        """Return the logged in user's name, used as the encryption recipient.

        Raises:
            GatewayUnavailable: If keybase cannot be run
            IdentityUnavailable: If nobody is logged in

        """
        status = self.status()
        if not status.name:
            raise IdentityUnavailable("Keybase did not report a user name")
        if not status.logged_in:
            raise IdentityUnavailable(f"Keybase user `{status.name}` is not logged in")
        return status.name

    def encrypt(self, recipient: str, plaintext: bytes, output_path: PathLike) -> None:
        """Encrypt plaintext to recipient, overwriting output_path."""
        args = [
            "encrypt", recipient,
            "--message", plaintext.decode("utf-8"),
            "--output", str(output_path),
        ]
        try:
            proc = self._run(args)
        except OSError as e:
            raise EncryptionFailed(f"Could not run {self.executable}: {e}") from e

        if proc.returncode != 0:
            raise EncryptionFailed()

    def decrypt(self, input_path: PathLike, output_path: PathLike) -> None:
        """Decrypt input_path into output_path."""
        try:
            proc = self._run(["decrypt", str(input_path), "--output", str(output_path)])
        except OSError as e:
            raise GatewayUnavailable(f"Could not run {self.executable}: {e}") from e

        if proc.returncode != 0:
            raise DecryptionFailed()
