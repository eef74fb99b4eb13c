"""Warden - user authentication and account management backend."""
