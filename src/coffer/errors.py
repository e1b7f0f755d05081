#!/usr/bin/env python3
"""Coffer errors - Closed set of failure kinds surfaced by the CLI.

Components raise these; only the command dispatcher turns them into a
message and an exit code.
"""

from typing import Optional

# Error codes
ERROR_CODES = {
    "WORKSPACE_ERROR": "Failed to prepare temporary coffer workspace",
    "MALFORMED_DOCUMENT": "Failed to unmarshal the decrypted coffer",
    "GATEWAY_UNAVAILABLE": "Keybase could not be run",
    "IDENTITY_UNAVAILABLE": "No logged in keybase user",
    "ENCRYPTION_FAILED": "Keybase failed to encrypt the coffer!",
    "DECRYPTION_FAILED": "Keybase failed to decrypt the coffer!",
    "AUDIT_UNAVAILABLE": "Failed to write the coffer audit log",
}


class CofferError(Exception):
    """Base class for every failure the CLI reports cleanly."""

    code = "COFFER_ERROR"
    exit_code = 1
    hint: Optional[str] = None

    def __init__(self, message: Optional[str] = None):
        self.message = message or ERROR_CODES.get(self.code, "Unknown error")
        super().__init__(self.message)


class WorkspaceError(CofferError):
    code = "WORKSPACE_ERROR"


class MalformedDocument(CofferError):
    code = "MALFORMED_DOCUMENT"


class AuditUnavailable(CofferError):
    code = "AUDIT_UNAVAILABLE"
    hint = "Check that ~/.coffer.log and its directory are writable."


class GatewayError(CofferError):
    """A failure reported by, or while running, the keybase executable."""


class GatewayUnavailable(GatewayError):
    code = "GATEWAY_UNAVAILABLE"
    hint = "Make sure keybase is installed and on your PATH."


class IdentityUnavailable(GatewayError):
    code = "IDENTITY_UNAVAILABLE"
    hint = "Log in with `keybase login` and try again."


class EncryptionFailed(GatewayError):
    code = "ENCRYPTION_FAILED"


class DecryptionFailed(GatewayError):
    code = "DECRYPTION_FAILED"
    hint = "If you have not yet created a coffer, please run `coffer create`."
