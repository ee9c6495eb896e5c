"""Configuration loader and model tests."""
