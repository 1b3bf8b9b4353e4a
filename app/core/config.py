from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BUSINESS_NAME: str = "1clickclearance"
    CONTACT_PHONE: str = "07775 605848"
    CONTACT_EMAIL: str = "hello@1clickclearance.co.uk"

    STRIPE_SECRET_KEY: str | None = None
    STRIPE_WEBHOOK_SECRET: str | None = None
    STRIPE_API_VERSION: str = "2024-06-20"
    PAYMENT_CURRENCY: str = "gbp"

    FORM_RELAY_URL: str | None = None

    ANALYTICS_ENDPOINT: str | None = None
    ANALYTICS_QUEUE_SIZE: int = 1000
    ANALYTICS_DEBUG: bool = False

    SESSION_STORE_DIR: str = "./data/sessions"
    COMPLETED_BOOKING_TTL_SECONDS: float = 60.0
    MOTION_CALENDAR_URL: str = "https://app.usemotion.com/meet/1clickclearance/booking"
    MINIMUM_CHARGE: int = 65

    @property
    def fallback_contact_message(self) -> str:
        return (
            "Failed to send message. Please call us directly at "
            f"{self.CONTACT_PHONE} or email {self.CONTACT_EMAIL}"
        )


settings = Settings()
