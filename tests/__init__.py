"""Tests for dockerup."""
