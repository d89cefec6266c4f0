"""Shared plumbing behind the public resource wrappers."""
