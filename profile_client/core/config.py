from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    api_base_url: str = "http://localhost:5000"
    token_storage_key: str = "authToken"
    login_path: str = "/login"
    dashboard_path: str = "/dashboard"
    success_redirect_delay_ms: int = 3000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="PROFILE_CLIENT_", env_file=".env", extra="ignore")

settings = Settings()
