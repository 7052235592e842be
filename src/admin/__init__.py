# src/admin/__init__.py - v1
"""Administrative cache operations: pre-generate, warm, inspect, purge."""
