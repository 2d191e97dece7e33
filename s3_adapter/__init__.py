"""
S3 Adapter - a client-side adapter for S3-compatible object storage.

This package contains:
- infrastructure: The object store adapter and its connection handle
- config: Application configuration
"""

__version__ = "0.1.0"
