"""Tests for onchain_ops.codec."""
