# src/cache/__init__.py - v1
"""Cache tiers: fingerprinting, disk store, memory store."""
