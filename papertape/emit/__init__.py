"""Hole emission into a drawing sink."""
