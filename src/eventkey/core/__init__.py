"""Core building blocks: digest, sortable encoding, records, settings."""
