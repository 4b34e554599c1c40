"""Single elimination tie sheet engine."""
