from pathlib import Path
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# -------------------------------------------------
# Explicitly load .env
# -------------------------------------------------

BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / ".env"

load_dotenv(dotenv_path=ENV_PATH)


class Settings(BaseSettings):
    DATABASE_URL: str
    ENVIRONMENT: str = "development"
    DB_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    # Display currency for amounts in exports and reminders
    CURRENCY: str = "USD"

    # Allowed browser origins for the admin UI (JSON list in the environment)
    CORS_ORIGINS: list[str] = ["*"]

    # Quotation file uploads (local disk unless S3_BUCKET_NAME is set)
    UPLOAD_DIR: str = str(BASE_DIR / "uploads" / "quotations")
    UPLOAD_URL_PREFIX: str = "/uploads/quotations"
    UPLOAD_MAX_BYTES: int = Field(default=10 * 1024 * 1024, description="Maximum quotation file size")
    AWS_ACCESS_KEY_ID: str | None = None
    AWS_SECRET_ACCESS_KEY: str | None = None
    AWS_REGION: str = "us-east-1"
    S3_BUCKET_NAME: str = ""
    S3_QUOTATION_PREFIX: str = "quotations"

    # Payment reminder cron (env: CRON_PAYMENT_REMINDER_INTERVAL_HOURS, UPCOMING_PAYMENT_WINDOW_DAYS)
    CRON_PAYMENT_REMINDER_ENABLED: bool = True
    CRON_PAYMENT_REMINDER_INTERVAL_HOURS: float = Field(default=1.0, description="Cron run interval in hours")
    UPCOMING_PAYMENT_WINDOW_DAYS: int = Field(default=7, description="Payments due within this many days count as upcoming")

    # Reminder e-mail: accept MAIL_* or SMTP_*. Optional; empty server or recipient disables it.
    MAIL_FROM: str = Field(default="", validation_alias=AliasChoices("MAIL_FROM", "SMTP_FROM_EMAIL"))
    MAIL_FROM_NAME: str = Field(default="Subscription Desk", validation_alias=AliasChoices("MAIL_FROM_NAME", "SMTP_FROM_NAME"))
    MAIL_USERNAME: str = Field(default="", validation_alias=AliasChoices("MAIL_USERNAME", "SMTP_USER"))
    MAIL_PASSWORD: str = Field(default="", validation_alias=AliasChoices("MAIL_PASSWORD", "SMTP_PASSWORD"))
    MAIL_SERVER: str = Field(default="", validation_alias=AliasChoices("MAIL_SERVER", "SMTP_HOST"))
    MAIL_PORT: int = Field(default=587, validation_alias=AliasChoices("MAIL_PORT", "SMTP_PORT"))
    REMINDER_EMAIL_TO: str = Field(default="", description="Admin address that receives payment reminders")

    # Outbound SDK client (app.sdk)
    API_BASE_URL: str = "http://127.0.0.1:8000/api/v1"
    API_TIMEOUT_SECONDS: float = 30.0

    class Config:
        extra = "ignore"
        env_file = str(ENV_PATH)
        env_file_encoding = "utf-8"


settings = Settings()
