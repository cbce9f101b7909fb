"""Application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from sitegraph.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    site_owner_id: str | None = None
    documents_table: str = "documents"
    request_timeout: float = 30.0

    data_dir: Path = Path("data")
    debug: bool = False
    log_level: str = "INFO"
    app_title: str = "SiteGraph"

    model_config = SettingsConfigDict(
        env_prefix="SITEGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    def require_store_settings(self) -> tuple[str, str, str]:
        """Return (url, anon key, owner id) or fail on the first missing one."""
        required = {
            "SITEGRAPH_SUPABASE_URL": self.supabase_url,
            "SITEGRAPH_SUPABASE_ANON_KEY": self.supabase_anon_key,
            "SITEGRAPH_SITE_OWNER_ID": self.site_owner_id,
        }
        for variable, value in required.items():
            if not value:
                raise ConfigurationError(variable)
        return self.supabase_url, self.supabase_anon_key, self.site_owner_id


settings = Settings()
