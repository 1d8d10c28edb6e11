"""Tests for onchain_ops.amounts."""
