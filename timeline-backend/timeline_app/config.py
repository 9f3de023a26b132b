from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: Optional[str] = None
    store_backend: Literal["memory", "postgres"] = "memory"
    seed_sample_data: bool = True
    default_zoom: Literal["hour", "day", "week", "month"] = "day"
    feature_timeline_ui: bool = True

    # Row geometry handed to the rendering layer (pixels)
    min_row_height: int = 64
    lane_height: int = 48
    row_padding: int = 16
    bar_height: int = 40

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TIMELINE_",
        extra="ignore",
    )

    def model_post_init(self, __context):
        # A configured database implies the postgres store unless told otherwise
        if self.database_url and "store_backend" not in self.model_fields_set:
            self.store_backend = "postgres"


settings = Settings()
