"""Tests for onchain_ops.chain."""
