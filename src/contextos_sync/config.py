"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Vault
    vault_path: Path = Field(default=Path("ContextOS"), description="Root of the Obsidian vault to sync")
    document_extensions: list[str] = Field(default_factory=lambda: [".md"])

    # Store (Supabase / PostgREST)
    supabase_url: str = Field(default="", description="Project URL, e.g. 'https://abc.supabase.co'")
    supabase_service_role_key: str = Field(default="", description="Service-role key used for upserts")
    store_timeout: float = 30.0

    # Sync
    sync_workers: int = Field(default=1, ge=1, description="1 keeps processing strictly sequential")
    ingestion_batch: str = "obsidian_vault_sync"
    default_source_type: str = "obsidian_vault"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def missing_store_settings(self) -> list[str]:
        """Return the env var names required by the store that are unset."""
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.supabase_service_role_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing


# Singleton: import `settings` wherever needed.
settings = Settings()
