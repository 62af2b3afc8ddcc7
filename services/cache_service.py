"""
Serviço de cache usando Redis
"""
import json
import redis
from typing import Any, Optional
from config import settings
import logging

logger = logging.getLogger(__name__)


class CacheService:
    def __init__(self, url: Optional[str] = None):
        self.redis_client = None
        url = url if url is not None else settings.REDIS_URL
        if url:
            try:
                self.redis_client = redis.from_url(
                    url,
                    decode_responses=True,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                # Testar conexão
                self.redis_client.ping()
                logger.info("Redis conectado com sucesso")
            except Exception as e:
                logger.warning(f"Não foi possível conectar ao Redis: {e}")
                self.redis_client = None
        else:
            logger.info("Redis não configurado, cache desabilitado")

    @property
    def habilitado(self) -> bool:
        return self.redis_client is not None

    def get(self, key: str) -> Optional[Any]:
        """Buscar valor do cache"""
        if not self.redis_client:
            return None

        try:
            value = self.redis_client.get(key)
            if value:
                return json.loads(value)
        except Exception as e:
            logger.error(f"Erro ao buscar cache {key}: {e}")

        return None

    def set(self, key: str, value: Any, ttl: int = None) -> bool:
        """Armazenar valor no cache"""
        if not self.redis_client:
            return False

        try:
            ttl = ttl or settings.GEO_CACHE_TTL
            serialized_value = json.dumps(value, default=str)
            self.redis_client.setex(key, ttl, serialized_value)
            return True
        except Exception as e:
            logger.error(f"Erro ao armazenar cache {key}: {e}")
            return False

    def ping(self) -> bool:
        """Usado pelo health check; levanta a exceção do redis se cair."""
        if not self.redis_client:
            return False
        return bool(self.redis_client.ping())


# Instância global do cache
cache_service = CacheService()
