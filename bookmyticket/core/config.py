from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "BookMyTicket API"
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str = "changeme"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 8
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60

    # Document store
    STORE_BACKEND: str = "mongo"  # mongo | memory
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DB: str = "bookmyticket"

    # Catalog
    FEATURED_MOVIES_LIMIT: int = 4
    RELATED_MOVIES_LIMIT: int = 4
    RELATED_MOVIES_OVERFETCH: int = 5

    # Bookings
    # Admin listing drops a booking unless both its movie and its user resolve.
    # The user-facing listing keeps bookings whose movie is gone.
    ADMIN_BOOKINGS_REQUIRE_EMBEDS: bool = True

    # Export
    EXPORT_FILENAME: str = "bookings.pdf"
    EXPORT_TITLE: str = "My Movie Bookings"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


settings = Settings()
