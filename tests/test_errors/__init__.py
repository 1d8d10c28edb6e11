"""Tests for onchain_ops.errors."""
