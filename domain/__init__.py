"""Lead, classification and campaign domain types."""
