from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Vision model (Gemini)
    gemini_api_key: str | None = Field(None, alias="GEMINI_API_KEY")
    gemini_model: str = Field("gemini-1.5-flash", alias="GEMINI_MODEL")
    vision_timeout_s: float = Field(9.0, alias="VISION_TIMEOUT_S")

    # Nutrition lookup (Nutritionix)
    nutritionix_app_id: str | None = Field(None, alias="NUTRITIONIX_APP_ID")
    nutritionix_api_key: str | None = Field(None, alias="NUTRITIONIX_API_KEY")
    nutritionix_base_url: str = Field("https://trackapi.nutritionix.com", alias="NUTRITIONIX_BASE_URL")
    nutrition_timeout_s: float = Field(5.0, alias="NUTRITION_TIMEOUT_S")

    # Image download from the upload storage
    image_fetch_timeout_s: float = Field(5.0, alias="IMAGE_FETCH_TIMEOUT_S")
    max_images_per_batch: int = Field(10, alias="MAX_IMAGES_PER_BATCH")

    # HTTP server / CORS
    api_host: str = Field("0.0.0.0", alias="API_HOST")
    api_port: int = Field(8000, alias="API_PORT")
    allowed_origins: str = Field("http://localhost:3000", alias="ALLOWED_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def nutritionix_configured(self) -> bool:
        return bool(self.nutritionix_app_id and self.nutritionix_api_key)


settings = Settings()
