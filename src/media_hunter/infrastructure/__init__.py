"""
Infrastructure layer - external systems.

- sources: stock-media provider adapters (httpx)
- embedding: sentence-embedding model client
- cache: in-memory vector cache
"""
