"""Shared fixtures and fixture packages."""
