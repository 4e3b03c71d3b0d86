"""
FastAPI feed service.

Provides a read-only REST API:
- GET /feed - Filterable, policy-gated item feed
- GET /sources - Enabled sources
- GET /tags - Filter vocabularies
- GET /health - Service health check
"""

from rignum.api.app import create_app

__all__ = ["create_app"]
