"""Command line front-end for the Spendlite ledger."""
