"""
Silversmith REST API.

Provides DRF ViewSets for:
- Product (read-only)
- Order (CRUD + send_to_production)
- ProductionBatch (read-only + move/hold/release)
- Codec (decode, expand)
"""
