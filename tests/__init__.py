"""Test suite for midcurve-api.

- unit/: Module tests with mocked collaborators
- api/: HTTP tests through TestClient with in-memory fake services
"""
