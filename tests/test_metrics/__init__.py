"""Tests for onchain_ops.metrics."""
