from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Dict


class HealthResponse(BaseModel):
    """Modelo de resposta para health check"""
    status: str
    timestamp: datetime
    version: str
    services: Dict[str, str]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2025-01-21T10:30:00",
                "version": "1.0.0",
                "services": {"database": "connected", "redis": "disabled"}
            }
        }
    )
