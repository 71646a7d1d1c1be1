"""Reusable test fixtures for goup tests."""
