"""Process adapters."""
