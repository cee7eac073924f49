"""Normalization, aggregation, campaign grouping and export services."""
