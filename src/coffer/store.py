#!/usr/bin/env python3
"""Coffer store - Read and write the encrypted coffer file via keybase.

Plaintext only ever touches disk inside a private temporary directory that
is removed as soon as a read finishes, successfully or not.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from .document import Coffer
from .errors import WorkspaceError
from .keybase import KeybaseGateway

# Constants
DEFAULT_COFFER = Path.home() / ".coffer"
EMPTY_COFFER = b'{"secrets":{}}'


def set_permissions(path, mode=0o600):
    """Set file permissions."""
    os.chmod(path, mode)


class CofferStore:
    """Read-modify-write access to the coffer file."""

    def __init__(self, gateway: KeybaseGateway, path: Optional[Path] = None):
        self.gateway = gateway
        self.path = Path(path) if path else DEFAULT_COFFER

    def read(self) -> Coffer:
        """Decrypt and parse the coffer.

        Raises:
            WorkspaceError: If the temporary workspace cannot be used
            DecryptionFailed: If keybase cannot decrypt the coffer
            MalformedDocument: If the decrypted payload is not a coffer

        """
        try:
            workspace = tempfile.TemporaryDirectory(prefix="coffer")
        except OSError as e:
            raise WorkspaceError(f"Failed to create temporary directory: {e}") from e

        with workspace as tmpdir:
            try:
                fd, plain_path = tempfile.mkstemp(prefix="coffer", dir=tmpdir)
                os.close(fd)
            except OSError as e:
                raise WorkspaceError(f"Failed to create temporary file: {e}") from e

            self.gateway.decrypt(self.path, plain_path)

            try:
                content = Path(plain_path).read_bytes()
            except OSError as e:
                raise WorkspaceError(f"Failed to read temporary coffer file: {e}") from e

        return Coffer.parse(content)

    def write(self, coffer: Coffer) -> None:
        """Serialize and re-encrypt the coffer to the current keybase user."""
        self._encrypt(coffer.serialize())

    def create(self) -> None:
        """Overwrite the coffer with an empty one."""
        self._encrypt(EMPTY_COFFER)

    def _encrypt(self, payload: bytes) -> None:
        recipient = self.gateway.current_identity_name()
        self.gateway.encrypt(recipient, payload, self.path)
        if self.path.exists():
            set_permissions(self.path)
