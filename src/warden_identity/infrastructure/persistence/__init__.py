"""Persistence adapters for warden_identity."""
