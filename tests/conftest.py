"""Pytest fixtures and utilities for coffer tests."""

import io
import json
import stat
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from coffer.audit import AuditLogger
from coffer.console import Console


# Stand-in for the keybase binary. "Ciphertext" is a JSON wrapper recording
# the recipient, so tests can check who a coffer was encrypted to.
FAKE_KEYBASE = '''#!{python}
import json
import sys
from pathlib import Path

HERE = Path(__file__).parent
args = sys.argv[1:]

with open(HERE / "calls.log", "a") as f:
    f.write(" ".join(args[:1]) + "\\n")

if args[0] == "status":
    sys.stdout.write((HERE / "status.json").read_text())
    sys.exit(0)

if args[0] == "encrypt":
    if (HERE / "fail-encrypt").exists():
        sys.exit(1)
    recipient, message, output = args[1], args[3], args[5]
    Path(output).write_text(json.dumps({{"recipient": recipient, "message": message}}))
    sys.exit(0)

if args[0] == "decrypt":
    source, output = Path(args[1]), args[3]
    if not source.exists():
        sys.stderr.write("no such file\\n")
        sys.exit(2)
    Path(output).write_text(json.loads(source.read_text())["message"])
    sys.exit(0)

sys.exit(64)
'''

STATUS = {
    "status": {"configured": True, "logged_in": True},
    "user": {
        "name": "alice",
        "key": {"key_id": "0123456789abcdef", "fingerprint": "aaaa bbbb cccc dddd"},
        "proofs": {"twitter": "alice", "github": "alice"},
    },
}


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep the coffer file and audit log out of the real home directory."""
    from coffer import audit, store

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(store, "DEFAULT_COFFER", home / ".coffer")
    monkeypatch.setattr(audit, "LOG_PATH", home / ".coffer.log")
    yield home


@pytest.fixture
def coffer_path(isolated_home):
    return isolated_home / ".coffer"


@pytest.fixture
def fake_keybase(tmp_path):
    """Write an executable fake keybase and return its directory helpers."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    exe = bin_dir / "keybase"
    exe.write_text(FAKE_KEYBASE.format(python=sys.executable))
    exe.chmod(exe.stat().st_mode | stat.S_IXUSR)

    (bin_dir / "status.json").write_text(json.dumps(STATUS))

    class FakeKeybase:
        path = exe
        directory = bin_dir

        def set_status(self, status):
            (bin_dir / "status.json").write_text(json.dumps(status))

        def fail_encrypt(self):
            (bin_dir / "fail-encrypt").write_text("")

        def calls(self):
            log = bin_dir / "calls.log"
            return log.read_text().split() if log.exists() else []

    return FakeKeybase()


@pytest.fixture
def make_console():
    """Build a Console fed from canned input.

    `answers` is what the user types at [y/N] prompts, `secrets` what they
    type at hidden prompts, in order.
    """
    def factory(answers="", secrets=()):
        pending = list(secrets)
        prompts = []

        def read_secret(prompt):
            prompts.append(prompt)
            return pending.pop(0)

        console = Console(
            stdin=io.StringIO(answers),
            stdout=io.StringIO(),
            stderr=io.StringIO(),
            read_secret=read_secret,
        )
        console.secret_prompts = prompts
        return console

    return factory


@pytest.fixture
def audit_logger(tmp_path):
    """Create an audit logger with temp log path."""
    return AuditLogger(tmp_path / "logs" / "coffer.log")


def assert_log_entry(audit_logger, result, action, name=None):
    """Helper to verify a log entry exists."""
    for line in audit_logger.read_recent(100):
        parts = line.strip().split()
        if len(parts) >= 5 and parts[2] == result and parts[3] == action:
            if name is None or parts[4] == name:
                return True
    return False
