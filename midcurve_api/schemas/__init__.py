"""Request schemas (pydantic v2) and response envelope models."""
