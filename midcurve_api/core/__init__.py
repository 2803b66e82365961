"""Core: configuration, enums, errors, result types and the DI container."""
