from dataclasses import dataclass, field
from typing import Optional, List

@dataclass
class CheckpointConfig:
    id: str
    name: str
    hint: Optional[str] = None

@dataclass
class EstimationConfig:
    live_window_hours: float = 2.0
    timezone: str = "Europe/Belgrade"

@dataclass
class ReportingConfig:
    cooldown_seconds: int = 60

@dataclass
class CacheConfig:
    enabled: bool = True
    ttl_seconds: int = 30

@dataclass
class PersistenceConfig:
    type: str = "sqlalchemy" # sqlalchemy | memory
    url: Optional[str] = None # Falls back to DATABASE_URL

@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000

@dataclass
class LoggingConfig:
    level: str = "INFO"

@dataclass
class AppConfig:
    checkpoints: List[CheckpointConfig] = field(default_factory=list)
    estimation: EstimationConfig = field(default_factory=EstimationConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
