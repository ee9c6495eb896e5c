"""Course discovery, navigation and sample export tests."""
