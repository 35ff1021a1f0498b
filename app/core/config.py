from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./print_farm.db"

    # API
    api_v1_str: str = "/api/v1"
    project_name: str = "Print Farm Operations"

    # Logging
    log_level: str = "INFO"
    logs_dir: str = ""

    # Sample data
    seed_sample_data: bool = True

    # Job queue
    time_per_item_minutes: int = 180
    placeholder_material: str = "PLA"
    placeholder_color: str = "#FF0000"
    placeholder_finish: str = "Matte"

    # Material stock
    low_stock_threshold: float = 30.0  # percent remaining
    critical_stock_threshold: float = 10.0
    default_finish: str = "Standard"

    # Tracking
    qr_prefix: str = "PRYYSM://project/"

    class Config:
        env_file = ".env"


settings = Settings()
