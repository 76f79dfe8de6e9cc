"""Operator utilities for the report publisher."""
