"""Use cases — CLI-facing operations returning result objects."""
