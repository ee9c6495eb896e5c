"""Tests for lesson checks, syntax validators and the verification pipeline."""
