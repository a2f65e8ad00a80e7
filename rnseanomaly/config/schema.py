from typing import List, Optional, Literal
from pydantic import Field, BaseModel, field_validator
from pydantic_settings import BaseSettings

class RedisSettings(BaseModel):
    url: str = "redis://localhost:6379/0"

class DjangoSettings(BaseModel):
    debug: bool = False
    secret_key: str = "insecure-default-key-for-dev"
    allowed_hosts: List[str] = ["*"]
    database_type: Literal["sqlite", "postgresql"] = "sqlite"
    database_name: str = "rnseanomaly"
    database_host: str = "localhost"
    database_port: int = 5432
    database_user: str = "rnse"
    database_password: str = ""
    # Browser origins of the dashboard allowed to call the API
    cors_allowed_origins: List[str] = ["http://localhost:3000"]

class ScorerSettings(BaseModel):
    type: Literal["rnse_core", "remote", "baseline"] = "rnse_core"
    seed: int = Field(default=42, ge=-(2**63), le=2**63 - 1)
    threshold: float = 0.25
    window: int = Field(default=25, ge=1)
    smoothing: Optional[float] = Field(default=None, gt=0.0, le=1.0)
    divergence_field: str = "D"
    # Remote only
    endpoint: Optional[str] = None
    timeout: float = 30.0

class StoreSettings(BaseModel):
    # memory: process-local, lost on restart
    type: Literal["django", "memory"] = "django"

class AnalysisSettings(BaseModel):
    flag_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    normalization_constant: float = Field(default=1.0, gt=0.0)
    min_length: int = Field(default=10, ge=1)
    value_column: int = Field(default=1, ge=0)
    max_upload_bytes: int = 10 * 1024 * 1024

    @field_validator("normalization_constant")
    @classmethod
    def _finite_constant(cls, value: float) -> float:
        if value == float("inf"):
            raise ValueError("normalization_constant must be finite")
        return value

class AppConfig(BaseSettings):
    django: DjangoSettings = Field(default_factory=DjangoSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    scorer: ScorerSettings = Field(default_factory=ScorerSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)

    model_config = {
        "case_sensitive": False,
        "env_file": ".env",
        "extra": "ignore"
    }
