"""Tests for onchain_ops.tools."""
