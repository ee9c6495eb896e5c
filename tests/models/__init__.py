"""Tests for the document and report models."""
