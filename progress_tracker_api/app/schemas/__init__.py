"""
Pydantic schema definitions for API payloads.

Schemas are separated from the stored documents to decouple the API
representation (camelCase JSON, string ids) from persistence (BSON
documents keyed by ``_id``).
"""
