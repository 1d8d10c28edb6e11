"""Tests for onchain_ops.config."""
