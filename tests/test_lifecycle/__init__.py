"""Tests for onchain_ops.lifecycle."""
