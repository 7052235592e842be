# src/pipeline/__init__.py - v1
"""Resolution protocol: disk, then memory, then generate."""
