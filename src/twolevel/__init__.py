"""Emulator and gateware for the two-level multiplication algorithm."""
