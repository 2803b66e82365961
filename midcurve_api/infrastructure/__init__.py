"""Infrastructure adapters (logging, session token verification)."""
