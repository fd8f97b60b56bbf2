"""
Configuration for sqlshim

Connection settings for the Supabase-backed table store. Values come from
the environment by default; validate() reports every problem at once.
"""

import os
from dataclasses import dataclass
from typing import List

from .errors import ConfigurationError


@dataclass
class ShimConfig:
    """Settings for SupabaseStore and SQLShim"""
    supabase_url: str = ""
    service_role_key: str = ""
    # Server-side client: no session persistence, no token refresh loop
    auto_refresh_token: bool = False
    persist_session: bool = False
    # Column list for every translated SELECT; "*" selects all columns
    select_columns: str = "*"

    def __post_init__(self):
        # Keys pasted into env files often carry a trailing newline
        self.supabase_url = (self.supabase_url or "").strip()
        self.service_role_key = (self.service_role_key or "").strip()

    @classmethod
    def from_env(cls) -> "ShimConfig":
        return cls(
            supabase_url=os.getenv("SUPABASE_URL", ""),
            service_role_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY", ""),
            select_columns=os.getenv("SQLSHIM_SELECT_COLUMNS", "*"),
        )

    def validate(self) -> List[str]:
        """
        Validate configuration parameters.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.supabase_url:
            errors.append("SUPABASE_URL is not set")
        elif not self.supabase_url.startswith(("http://", "https://")):
            errors.append(f"SUPABASE_URL must be an http(s) URL, got {self.supabase_url!r}")

        if not self.service_role_key:
            errors.append("SUPABASE_SERVICE_ROLE_KEY is not set")

        if not self.select_columns.strip():
            errors.append("select_columns cannot be empty")

        return errors

    def require_valid(self) -> "ShimConfig":
        errors = self.validate()
        if errors:
            raise ConfigurationError(errors)
        return self
