"""Services — path normalization, registry, resolver, inspection."""
