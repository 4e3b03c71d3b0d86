"""Rignum: read-only, policy-gated feed of captured market metadata."""

__version__ = "0.1.0"
