"""Clients for external services used while building message artifacts."""
