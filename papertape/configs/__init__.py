"""Tape configuration: shipped ``tape.yaml`` defaults and the job record."""
