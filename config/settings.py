"""
Configuration settings - edit values directly here
"""

from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings - configure values below"""
    
    # ===================
    # Kupo Configuration
    # ===================
    kupo_url: str = "http://localhost:1442"
    kupo_timeout: float = 30.0  # seconds, per request


# Global settings instance - import this
settings = Settings()
