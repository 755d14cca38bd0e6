"""Application settings for the DOCX-to-HTML API."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from docxhtml.ir import DEFAULT_SHARE_BASE_URL


class Settings(BaseSettings):
    app_name: str = "docxhtml-server"
    api_prefix: str = "/v1"
    environment: str = "local"
    log_level: str = "INFO"

    max_upload_bytes: int = 25 * 1024 * 1024
    default_extract_page_styles: bool = True
    share_base_url: str = DEFAULT_SHARE_BASE_URL

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
