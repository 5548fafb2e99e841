"""Test suite for the pytest-nest package.

This package contains unit and integration tests validating tree
declaration, lazy discovery, configuration refinement, tag activation
and pytest integration of nested test specifications.
"""
