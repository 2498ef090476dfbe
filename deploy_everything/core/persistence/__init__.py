"""Persistence — manifest, journal layout and run ledger."""
