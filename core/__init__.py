"""
Image Map Core Package.

This package contains the application logic that wires the ingestion
pipeline and serves the read side, separated from the web layer.

ARCHITECTURE RULES:
- core/ modules may only import from:
  - Python standard library
  - utils/ (infrastructure adapters)
  - ingestion/ (pipeline, ports and backends)
  - config (for global configuration)

- core/ modules MUST NOT import from:
  - web/ (no Flask dependencies)
  - flask, werkzeug, or any web-specific packages
"""

__all__ = [
    "ingest_core",
    "points_core",
    "upload_core",
]
