# src/render/__init__.py - v1
"""Layer compositing and asset resolution."""
