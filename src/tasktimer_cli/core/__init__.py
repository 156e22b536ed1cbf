"""Event bus and timing primitives."""
