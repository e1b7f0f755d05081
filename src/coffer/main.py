#!/usr/bin/env python3
"""Coffer CLI - A secret storage utility, built on keybase and PGP.

Each command is one read-modify-write cycle over ~/.coffer. All
encryption and decryption is done by the keybase executable.
"""

import argparse
import sys
from dataclasses import dataclass

from . import __version__
from .audit import AuditLogger
from .console import Console
from .errors import AuditUnavailable, CofferError
from .keybase import DEFAULT_EXECUTABLE, KeybaseGateway
from .store import CofferStore

BOLD = "\033[1m"
RESET = "\033[0m"


@dataclass
class Context:
    """Collaborators shared by every command."""

    store: CofferStore
    console: Console
    audit: AuditLogger


def cmd_store(args, ctx):
    """Store a secret under a name, replacing any previous value."""
    console = ctx.console

    if args.name == "":
        console.echo("The empty string is not a valid secret name")
        ctx.audit.record("STORE", "REJECTED", args.name, "empty-name")
        return

    secret = console.ask_secret("Type the new secret:")
    confirm = console.ask_secret("Type again to confirm:")

    if confirm != secret:
        console.echo("Secrets do not match!")
        ctx.audit.record("STORE", "REJECTED", args.name, "mismatch")
        return

    if secret == "":
        console.echo("The empty string is not a valid secret")
        ctx.audit.record("STORE", "REJECTED", args.name, "empty")
        return

    coffer = ctx.store.read()
    coffer.set(args.name, secret)
    ctx.store.write(coffer)

    console.echo("Saved.")
    ctx.audit.record("STORE", "OK", args.name)


def cmd_list(args, ctx):
    """List secret names. Values are never shown."""
    coffer = ctx.store.read()

    ctx.console.echo("The currently stored secrets are:")
    for name in coffer.names():
        ctx.console.echo(name)

    ctx.audit.record("LIST", "OK")


def cmd_get(args, ctx):
    """Print the secret stored under a name."""
    coffer = ctx.store.read()
    secret = coffer.get(args.name)

    if secret is None:
        ctx.console.echo(f"No secret with name `{args.name}`")
        ctx.audit.record("GET", "NOT_FOUND", args.name)
        return

    ctx.console.echo(secret)
    ctx.audit.record("GET", "OK", args.name)


def cmd_create(args, ctx):
    """Replace any existing coffer with an empty one."""
    console = ctx.console

    if not console.confirm(f"This will{BOLD} destroy{RESET} any existing coffer. Continue? [y/N] "):
        console.echo("Exiting, the existing coffer has not been modified.")
        ctx.audit.record("CREATE", "ABORTED")
        return

    ctx.store.create()

    console.echo(f"Empty coffer created at '{ctx.store.path}'")
    ctx.audit.record("CREATE", "OK")


def cmd_delete(args, ctx):
    """Remove a secret. Deleting a missing name is not an error."""
    console = ctx.console

    if not console.confirm(f"This will{BOLD} delete{RESET} the secret for `{args.name}`. Continue? [y/N] "):
        console.echo("Exiting, the coffer has not been modified.")
        ctx.audit.record("DELETE", "ABORTED", args.name)
        return

    coffer = ctx.store.read()
    coffer.delete(args.name)
    ctx.store.write(coffer)

    console.echo("Deleted.")
    ctx.audit.record("DELETE", "OK", args.name)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='coffer',
        description="A secret storage utility, built on keybase and PGP"
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        '--keybase',
        default=DEFAULT_EXECUTABLE,
        metavar='EXE',
        help=f'Keybase executable to run (default: {DEFAULT_EXECUTABLE})'
    )
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # store
    store_parser = subparsers.add_parser('store', aliases=['s'], help='store a secret')
    store_parser.add_argument('name', help='Secret name')
    store_parser.set_defaults(func=cmd_store, action_name='STORE')

    # list
    list_parser = subparsers.add_parser('list', aliases=['l', 'ls'], help='list the currently stored secrets')
    list_parser.set_defaults(func=cmd_list, action_name='LIST')

    # get
    get_parser = subparsers.add_parser('get', aliases=['g'], help='get a secret that matches the given key (if any)')
    get_parser.add_argument('name', help='Secret name')
    get_parser.set_defaults(func=cmd_get, action_name='GET')

    # create
    create_parser = subparsers.add_parser('create', aliases=['c'], help='create an empty coffer')
    create_parser.set_defaults(func=cmd_create, action_name='CREATE')

    # delete
    delete_parser = subparsers.add_parser('delete', aliases=['d'], help='delete a secret from the coffer')
    delete_parser.add_argument('name', help='Secret name')
    delete_parser.set_defaults(func=cmd_delete, action_name='DELETE')

    return parser


def report_error(console, error):
    console.error(error.message)
    if error.hint:
        console.error(error.hint)


def main(argv=None, console=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    console = console or Console()

    try:
        audit = AuditLogger()
    except AuditUnavailable as e:
        report_error(console, e)
        sys.exit(e.exit_code)

    ctx = Context(
        store=CofferStore(KeybaseGateway(args.keybase)),
        console=console,
        audit=audit,
    )

    try:
        args.func(args, ctx)
    except CofferError as e:
        report_error(console, e)
        if not isinstance(e, AuditUnavailable):
            try:
                audit.record(args.action_name, "ERROR", getattr(args, 'name', '-'), e.code)
            except AuditUnavailable as audit_error:
                report_error(console, audit_error)
        sys.exit(e.exit_code)


if __name__ == '__main__':
    main()
