"""Integrations package - durable cart persistence and the remote order API."""
