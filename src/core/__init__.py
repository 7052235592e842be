# src/core/__init__.py - v1
"""Domain models, errors and the fixed sheet layout."""
