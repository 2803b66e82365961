"""Domain layer: API-owned value types and ports to the services layer."""
