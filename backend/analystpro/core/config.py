from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    project_name: str = "AnalystPro"
    env: str = "dev"

    api_host: str = "0.0.0.0"
    api_port: int = 8000

    cors_origins: str = "*"  # comma-separated
    log_level: str = "INFO"

    registry_path: str = "registry.json"
    preview_max_rows: int = 1000

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    def cors_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

settings = Settings()
