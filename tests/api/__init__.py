"""API tests package.

End-to-end tests for REST API endpoints using TestClient.
Tests the complete request/response cycle including:
- Authentication
- Request validation
- Service delegation and error classification
- Response envelopes and HTTP status codes

Note:
    Services are in-memory fakes injected via create_app(services=...).
"""
