"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./auth.db"
    database_echo: bool = False

    # ── Auth extension ───────────────────────────────────────────────────
    auth_route_prefix: str = ""
    bcrypt_rounds: int = 12                  # work factor for new hashes
    accept_legacy_md5_hashes: bool = False   # verify unsalted MD5 rows from older deployments

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 8000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


config = Settings()
