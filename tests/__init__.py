"""Tests - Sum-check test suite (run via pytest)."""
