"""Money helpers, domain types and typed errors."""
