from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""
    
    # Database
    DATABASE_URL: str
    
    # API
    API_TITLE: str = "Community API"
    API_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # Security
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24
    
    # Forum
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    COMMENTS_REQUIRE_POST_PERMISSION: bool = True
    INITIAL_CATEGORIES: List[str] = ["English Learning", "日本語学習"]
    
    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()
