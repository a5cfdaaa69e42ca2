"""Shared utilities for formatdiff."""
