from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    telegram_bot_token: str = ""
    bot_username: str = ""  # resolved from Telegram at startup when left empty
    google_sheets_spreadsheet_id: str = ""
    google_service_account_file: str = "service_account.json"
    google_service_account_json: str = ""  # inline credentials take precedence over the file
    timezone: str = "Europe/Moscow"
    locale: str = "ru"
    currency: str = "₽"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = {"env_file": ".env"}


settings = Settings()
