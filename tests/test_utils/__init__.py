"""Tests for onchain_ops.utils."""
