from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # API Configuration
    CORS_ORIGINS: Optional[str] = None

    # Cloudinary (media store)
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None

    # Cloudinary search caps a single page at 500 resources
    SEARCH_MAX_RESULTS: int = 500

    # Firebase (identity provider)
    FIREBASE_SERVICE_ACCOUNT_BASE64: Optional[str] = None
    FIREBASE_PROJECT_ID: Optional[str] = None

    # Custom claim that marks an administrator
    ADMIN_CLAIM: str = "admin"

    # Logging
    LOG_LEVEL: Optional[str] = None

    class Config:
        env_file = ".env"
        extra = "ignore"

    def cloudinary_credentials(self) -> dict:
        """Stripped Cloudinary credentials; blank values come back as None."""
        def clean(value: Optional[str]) -> Optional[str]:
            if value is None:
                return None
            value = value.strip()
            return value or None

        return {
            "cloud_name": clean(self.CLOUDINARY_CLOUD_NAME),
            "api_key": clean(self.CLOUDINARY_API_KEY),
            "api_secret": clean(self.CLOUDINARY_API_SECRET),
        }

# Create global settings instance
settings = Settings()
