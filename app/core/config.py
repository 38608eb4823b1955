"""
Application configuration
Reads settings from environment variables
"""
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""
    
    # Application
    APP_NAME: str = "Template Recommendation Service"
    DEBUG: bool = False
    PORT: int = 8080
    ENABLE_CRON: bool = True
    LOG_LEVEL: str = "INFO"
    
    # Database
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "root"
    DB_NAME: str = "templates"
    DATABASE_URL_OVERRIDE: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    
    # SSL
    SSL_ENABLED: bool = False
    SSL_KEY_PATH: Optional[str] = "/certs/privkey.pem"
    SSL_CERT_PATH: Optional[str] = "/certs/fullchain.pem"
    
    # Recommendations
    PREFERENCE_CACHE_MAX_SIZE: int = 10000  # 0 disables the LRU bound
    RECOMMENDATION_CANDIDATE_POOL: int = 100
    RECOMMENDATION_DEFAULT_LIMIT: int = 10
    SIMILAR_TEMPLATES_DEFAULT_LIMIT: int = 5
    TRENDING_DEFAULT_LIMIT: int = 10
    CACHE_CLEAR_CRON_HOUR: int = 3
    CRON_TIMEZONE: str = "UTC"
    
    @property
    def DATABASE_URL(self) -> str:
        """Construct database URL"""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
    
    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# Global settings instance
settings = Settings()
