# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Family Registry API:
# - conftest.py: FakeSupabase in-memory client and seeded household fixtures
# - test_models.py: Unit tests for Pydantic model validation
# - test_astrology.py / test_vietnam_data.py / test_filters.py: lib/ modules
# - test_*_service.py: Service layer against FakeSupabase
# - test_api.py: Endpoint tests through FastAPI's TestClient
#
# Run tests with: poetry run pytest
# =============================================================================
