"""Property-based tests for querystash invariants."""
