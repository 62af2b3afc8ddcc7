"""
Enriquecimento de IP via ip-api.com.

O provedor é tratado como caixa-preta: ou devolve um GeoInfo completo
(status=success) ou nada. Falha de rede, HTTP != 200 ou status=fail viram
None e o evento é gravado sem enriquecimento.
"""
from typing import Optional
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.concurrency import run_in_threadpool

from config import settings
from services.cache_service import CacheService, cache_service

logger = structlog.get_logger()

CACHE_PREFIX = "geo"


class GeoInfo(BaseModel):
    """Resposta de sucesso do ip-api (nomes dos campos seguem o provedor via alias)."""
    country: Optional[str] = None
    region_name: Optional[str] = Field(None, alias="regionName")
    city: Optional[str] = None
    zip: Optional[str] = None
    isp: Optional[str] = None
    as_name: Optional[str] = Field(None, alias="as")
    lat: Optional[float] = None
    lon: Optional[float] = None
    proxy: bool = False
    mobile: bool = False
    hosting: bool = False

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TipoEvento:
    PROXY = "proxy"
    MOBILE = "mobile"
    HOSTING = "hosting"
    # sem classificação disponível (provedor falhou ou não respondeu)
    UNKNOWN = "unknown"


def classificar_tipo_evento(geo: Optional[GeoInfo]) -> str:
    if geo is None:
        return TipoEvento.UNKNOWN
    if geo.proxy:
        return TipoEvento.PROXY
    if geo.mobile:
        return TipoEvento.MOBILE
    return TipoEvento.HOSTING


class GeolocalizacaoService:
    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        cache: Optional[CacheService] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.IP_API_URL).rstrip("/")
        self.timeout = timeout or settings.IP_API_TIMEOUT
        self.cache = cache
        self.transport = transport

    def _url(self, ip: str) -> str:
        return f"{self.base_url}/{quote(ip, safe='')}"

    async def consultar(self, ip: str) -> Optional[GeoInfo]:
        chave = f"{CACHE_PREFIX}:{ip}"
        if self.cache is not None:
            # redis-py é síncrono (timeout de 2s): fora do event loop
            em_cache = await run_in_threadpool(self.cache.get, chave)
            if em_cache:
                logger.debug("Geolocalizacao em cache", ip=ip)
                return GeoInfo.model_validate(em_cache)

        geo = await self._consultar_provedor(ip)

        if geo is not None and self.cache is not None:
            await run_in_threadpool(self.cache.set, chave, geo.model_dump(by_alias=True), settings.GEO_CACHE_TTL)
        return geo

    async def _consultar_provedor(self, ip: str) -> Optional[GeoInfo]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self._url(ip), params={"fields": settings.IP_API_FIELDS})
        except httpx.HTTPError as e:
            logger.warning("Falha ao consultar ip-api", ip=ip, error=str(e))
            return None

        if response.status_code != 200:
            logger.warning("ip-api respondeu com erro", ip=ip, status_code=response.status_code)
            return None

        try:
            dados = response.json()
        except ValueError:
            logger.warning("ip-api devolveu JSON invalido", ip=ip)
            return None

        if not isinstance(dados, dict) or dados.get("status") != "success":
            logger.info(
                "ip-api sem dados para o IP",
                ip=ip,
                message=dados.get("message") if isinstance(dados, dict) else None,
            )
            return None

        try:
            return GeoInfo.model_validate(dados)
        except ValidationError as e:
            logger.warning("Resposta do ip-api fora do formato", ip=ip, error=str(e))
            return None


def get_geolocalizacao_service() -> GeolocalizacaoService:
    """Dependência FastAPI (sobrescrita nos testes)."""
    return GeolocalizacaoService(cache=cache_service)
