from decouple import config, Csv

class Settings:
    # Database Configuration
    DATABASE_URL: str = config("DATABASE_URL", default="sqlite:///./storefront.db")
    DATABASE_ECHO: bool = config("DATABASE_ECHO", default=False, cast=bool)

    # Security Configuration
    SECRET_KEY: str = config("SECRET_KEY", default="your-secret-key-here-change-in-production")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = config("ACCESS_TOKEN_EXPIRE_MINUTES", default=60 * 24, cast=int)

    # Session cookies
    SESSION_COOKIE_NAME: str = config("SESSION_COOKIE_NAME", default="storefront_session")
    VIEW_SESSION_COOKIE_NAME: str = config("VIEW_SESSION_COOKIE_NAME", default="product_view_session")
    VIEW_SESSION_MAX_AGE: int = config("VIEW_SESSION_MAX_AGE", default=60 * 60 * 24 * 30, cast=int)

    # CORS
    CORS_ORIGINS: list = config(
        "CORS_ORIGINS",
        default="http://localhost:3000,http://127.0.0.1:3000",
        cast=Csv()
    )

    # Environment
    ENVIRONMENT: str = config("ENVIRONMENT", default="development")
    DEBUG: bool = config("DEBUG", default=False, cast=bool)

    # Logging
    LOG_LEVEL: str = config("LOG_LEVEL", default="INFO")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

settings = Settings()
