"""HTTP surface of the Temple Hub service."""
