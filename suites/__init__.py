"""Concrete suite implementations and catalog wiring."""
