"""Application Settings - Central Configuration"""
from functools import lru_cache
from typing import List, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    app_name: str = "Election Workflow Service"
    
    # Election administration
    admin_identity: str = "admin"
    
    # Authentication (JWT bearer tokens, identity in the "sub" claim)
    jwt_secret: str = "change-me-election-workflow-signing-secret"
    jwt_algorithm: str = "HS256"
    
    # Event log sink
    event_log_backend: Literal["memory", "mongo"] = "memory"
    
    # MongoDB (only used by the mongo event log backend)
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "election_dev"
    events_collection: str = "election_events"
    
    # Logging
    logs_path: str = "./logs"
    log_level: str = "INFO"
    log_to_file: bool = True
    
    # CORS - set to "*" to allow all origins
    cors_origins: str = "*"
    
    # Environment
    environment: str = "development"
    debug: bool = True
    
    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string to list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]
    
    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment.lower() == "production"
    
    @property
    def is_development(self) -> bool:
        """Development-like environments skip token signature checks"""
        return self.environment.lower() in ["development", "dev", "local"]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
