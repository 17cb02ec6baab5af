"""Exchange aggregator core."""
