"""Mokshya protocol client packages."""
