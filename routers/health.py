from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from schemas.health import HealthResponse
from database import SessionLocal, testar_conexao
from services.cache_service import cache_service
from config import settings
from datetime import datetime, timezone
import structlog

logger = structlog.get_logger()
router = APIRouter()


@router.get("/health",
            response_model=HealthResponse,
            summary="Health Check",
            description="Verifica a saúde da aplicação e suas dependências")
async def health_check():
    """
    Endpoint de health check que verifica:
    - Conectividade com o banco (SQLAlchemy)
    - Conectividade com Redis (apenas se REDIS_URL estiver configurado)
    - Versão da aplicação
    """
    services_status = {}
    overall_status = "healthy"

    # Testa banco
    db = SessionLocal()
    try:
        testar_conexao(db)
        services_status["database"] = "connected"
    except Exception as e:
        services_status["database"] = f"error: {str(e)}"
        overall_status = "unhealthy"
        logger.error("Database health check failed", error=str(e))
    finally:
        db.close()

    # Testa Redis (cache de geolocalização é opcional)
    if cache_service.habilitado:
        try:
            cache_service.ping()
            services_status["redis"] = "connected"
        except Exception as e:
            services_status["redis"] = f"error: {str(e)}"
            overall_status = "unhealthy"
            logger.error("Redis health check failed", error=str(e))
    else:
        services_status["redis"] = "disabled"

    health_response = HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
        services=services_status,
    )

    status_code = status.HTTP_200_OK if overall_status == "healthy" else status.HTTP_503_SERVICE_UNAVAILABLE

    logger.info("Health check executado", status=overall_status, services=services_status)

    return JSONResponse(
        status_code=status_code,
        content=health_response.model_dump(mode="json"),
    )
