"""Test fixtures: sample pasted markup with expected conversions."""
