"""Tagged result envelope handed to the HTTP layer."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass
class WeatherResponse:
    """
    {type, success, data | message, error, timestamp}.

    Successful responses carry `data`; failed ones carry `error` (and usually a
    `message` for display). Fields left as None are omitted by to_dict().
    """
    type: str
    success: bool
    data: Optional[Any] = None
    message: Optional[str] = None
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def ok(cls, type_: str, data: Any) -> "WeatherResponse":
        return cls(type=type_, success=True, data=data)

    @classmethod
    def failure(cls, type_: str, error: str, message: Optional[str] = None) -> "WeatherResponse":
        return cls(type=type_, success=False, error=error, message=message or error)

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "type": self.type,
            "success": self.success,
            "data": self.data,
            "message": self.message,
            "error": self.error,
            "timestamp": self.timestamp.isoformat(),
        }
        return {key: value for key, value in payload.items() if value is not None}
