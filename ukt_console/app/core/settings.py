import os
from pathlib import Path


def _optional_float(value: str | None) -> float | None:
    if value is None or value.strip() == "":
        return None
    return float(value)


class Settings:
    def __init__(self):
        self.app_name = "UKT Billing Console"
        self.api_version = "1.0.0"
        self.environment = os.getenv("UKT_ENVIRONMENT", "development")
        self.api_url = os.getenv("UKT_API_URL", "https://ti054c04.agussbn.my.id/api").rstrip("/")
        self.token_path = Path(os.getenv("UKT_TOKEN_PATH", str(Path.home() / ".config" / "ukt-console" / "token.json")))
        self.log_level = os.getenv("UKT_LOG_LEVEL", "INFO").upper()
        # No timeout unless one is configured explicitly.
        self.request_timeout = _optional_float(os.getenv("UKT_REQUEST_TIMEOUT"))
        self.sandbox_database_url = os.getenv("UKT_SANDBOX_DATABASE_URL", "sqlite://")
        self.secret_key = os.getenv("UKT_SANDBOX_SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(os.getenv("UKT_TOKEN_EXPIRE_MINUTES", "60"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes

    @property
    def storage_url(self) -> str:
        return f"{self.api_url}/storage"


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
