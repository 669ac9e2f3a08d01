"""Tests for the content vault."""
