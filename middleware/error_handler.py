"""
Middleware para tratamento centralizado de erros
"""
import logging
import traceback
import uuid
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from config import settings

# Configurar logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        # reaproveita o id vindo do proxy, se houver
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            return response
        except HTTPException as e:
            logger.warning(
                f"HTTP Exception: {e.status_code} - {e.detail} - Path: {request.url.path} - Correlation: {correlation_id}"
            )
            raise e
        except Exception as e:
            logger.error(
                f"Unexpected error: {str(e)} - Path: {request.url.path} - Correlation: {correlation_id} - Traceback: {traceback.format_exc()}"
            )

            if settings.is_development:
                # Em desenvolvimento, retorna detalhes do erro
                content = {
                    "detail": "Erro interno do servidor",
                    "error": str(e),
                    "correlation_id": correlation_id,
                    "traceback": traceback.format_exc() if settings.DEBUG else None,
                }
            else:
                # Em produção, retorna erro genérico
                content = {"detail": "Erro interno do servidor", "correlation_id": correlation_id}

            return JSONResponse(
                status_code=500,
                content=content,
                headers={CORRELATION_HEADER: correlation_id},
            )
