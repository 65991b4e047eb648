"""Frontends - user interfaces built on ragraph.core."""
