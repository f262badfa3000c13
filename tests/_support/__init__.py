"""
Test support utilities for recordkit tests.

Record types and seed data shared across test modules live here rather
than in ``conftest.py`` so test files can import them directly.
"""
