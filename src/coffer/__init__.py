"""Coffer - A secret storage utility, built on keybase and PGP.
Secrets live in a single JSON document encrypted to your own keybase identity.
"""

__version__ = "0.1.0"
