"""Business logic layer: the Registry and its access/lifecycle rules."""
