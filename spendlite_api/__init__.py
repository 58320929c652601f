"""HTTP front-end for the Spendlite ledger."""

from .app import create_app

__all__ = ["create_app"]
