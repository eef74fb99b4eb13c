"""Shared domain helpers."""

from warden_identity.domain.shared.time import ensure_tz_aware, utc_now

__all__ = ["ensure_tz_aware", "utc_now"]
