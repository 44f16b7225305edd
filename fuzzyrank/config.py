"""Configuration du microservice de classement flou."""
from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration de l'application."""

    # Redis
    REDIS_URL: str = "redis://redis:6379/0"
    CACHE_ENABLED: bool = True
    CACHE_TTL: int = 300

    # Limites
    DEFAULT_LIMIT: int = 1_000
    SCORE_CACHE_SIZE: int = 4096

    # Scoring - Poids (la somme doit valoir 1.0)
    W_START: float = 0.20
    W_COMPACTNESS: float = 0.50
    W_COVERAGE: float = 0.30

    # Score sentinelle "aucune correspondance"
    NO_MATCH_SCORE: float = -1.0

    # Classement
    DROP_UNMATCHED: bool = False

    # Logs
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @model_validator(mode="after")
    def check_scoring(self) -> "Settings":
        """Valide les poids et la sentinelle au chargement."""
        weights = (self.W_START, self.W_COMPACTNESS, self.W_COVERAGE)
        if any(w < 0 for w in weights):
            raise ValueError("Scoring weights must be non-negative")
        if abs(sum(weights) - 1.0) > 1e-6:
            raise ValueError(f"Scoring weights must sum to 1.0, got {sum(weights):.6f}")
        if self.NO_MATCH_SCORE >= 0:
            raise ValueError("NO_MATCH_SCORE must be negative")
        return self


settings = Settings()
