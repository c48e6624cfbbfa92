"""
Pytest test suite for the Tip Assistant backend.

Test categories:
- Unit tests: codecs, key derivation, services against an in-memory store
- API tests: FastAPI routes with the store swapped via dependency overrides
"""
