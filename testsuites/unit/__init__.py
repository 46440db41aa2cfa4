"""Unit tests for the UI framework (no browser required)."""
