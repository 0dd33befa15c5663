"""Claim verification pipeline: multi-provider evidence search, source trust scoring and verdict synthesis."""

__version__ = "0.1.0"
