"""Identifier decoding, encoding and misalignment checks."""
