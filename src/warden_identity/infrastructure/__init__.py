"""Infrastructure adapters: persistence, email delivery, OAuth provider."""
