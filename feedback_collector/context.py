"""Application context shared with every request handler."""

from dataclasses import dataclass

from feedback_collector.auth.tokens import TokenService
from feedback_collector.config import Settings


@dataclass(frozen=True)
class AppContext:
    """Everything a handler needs beyond the request and its DB session."""
    settings: Settings
    tokens: TokenService
    
    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        return cls(
            settings=settings,
            tokens=TokenService(settings.jwt_secret, settings.jwt_expires_hours),
        )
