"""
Testes do cliente ip-api (sem rede: httpx.MockTransport)
"""
import threading

import httpx
import pytest

from services.geolocalizacao_service import (
    GeoInfo,
    GeolocalizacaoService,
    TipoEvento,
    classificar_tipo_evento,
)

RESPOSTA_SUCESSO = {
    "status": "success",
    "country": "Brazil",
    "regionName": "Sao Paulo",
    "city": "Sao Paulo",
    "zip": "01000-000",
    "isp": "Provedor X",
    "as": "AS12345 Provedor X",
    "lat": -23.55,
    "lon": -46.63,
    "proxy": False,
    "mobile": True,
    "hosting": False,
}


class CacheMemoria:
    def __init__(self):
        self.dados = {}

    def get(self, key):
        return self.dados.get(key)

    def set(self, key, value, ttl=None):
        self.dados[key] = value
        return True


def _servico(handler, cache=None):
    return GeolocalizacaoService(
        base_url="http://ip-api.test/json",
        cache=cache,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_consulta_com_sucesso():
    requisicoes = []

    def handler(request):
        requisicoes.append(request)
        return httpx.Response(200, json=RESPOSTA_SUCESSO)

    geo = await _servico(handler).consultar("1.2.3.4")

    assert geo is not None
    assert geo.region_name == "Sao Paulo"
    assert geo.as_name == "AS12345 Provedor X"
    assert geo.mobile is True
    assert requisicoes[0].url.path == "/json/1.2.3.4"
    assert "regionName" in requisicoes[0].url.params["fields"]


@pytest.mark.asyncio
async def test_status_fail_retorna_none():
    def handler(request):
        return httpx.Response(200, json={"status": "fail", "message": "private range"})

    assert await _servico(handler).consultar("10.0.0.1") is None


@pytest.mark.asyncio
async def test_http_de_erro_retorna_none():
    def handler(request):
        return httpx.Response(429, text="too many requests")

    assert await _servico(handler).consultar("1.2.3.4") is None


@pytest.mark.asyncio
async def test_falha_de_rede_retorna_none():
    def handler(request):
        raise httpx.ConnectError("sem rede", request=request)

    assert await _servico(handler).consultar("1.2.3.4") is None


@pytest.mark.asyncio
async def test_json_invalido_retorna_none():
    def handler(request):
        return httpx.Response(200, text="<html>")

    assert await _servico(handler).consultar("1.2.3.4") is None


@pytest.mark.asyncio
async def test_sucesso_vai_para_o_cache():
    chamadas = []

    def handler(request):
        chamadas.append(request)
        return httpx.Response(200, json=RESPOSTA_SUCESSO)

    cache = CacheMemoria()
    servico = _servico(handler, cache=cache)

    primeira = await servico.consultar("1.2.3.4")
    segunda = await servico.consultar("1.2.3.4")

    assert len(chamadas) == 1
    assert "geo:1.2.3.4" in cache.dados
    assert segunda == primeira


@pytest.mark.asyncio
async def test_falha_nao_vai_para_o_cache():
    def handler(request):
        return httpx.Response(200, json={"status": "fail"})

    cache = CacheMemoria()
    await _servico(handler, cache=cache).consultar("1.2.3.4")
    assert cache.dados == {}


@pytest.mark.asyncio
async def test_cache_consultado_fora_do_event_loop():
    class CacheComThread(CacheMemoria):
        def __init__(self):
            super().__init__()
            self.threads = []

        def get(self, key):
            self.threads.append(threading.get_ident())
            return super().get(key)

        def set(self, key, value, ttl=None):
            self.threads.append(threading.get_ident())
            return super().set(key, value, ttl)

    def handler(request):
        return httpx.Response(200, json=RESPOSTA_SUCESSO)

    cache = CacheComThread()
    await _servico(handler, cache=cache).consultar("1.2.3.4")

    assert len(cache.threads) == 2
    assert threading.get_ident() not in cache.threads


class TestClassificarTipoEvento:
    def test_sem_dados_e_desconhecido(self):
        assert classificar_tipo_evento(None) == TipoEvento.UNKNOWN

    def test_proxy_tem_precedencia(self):
        assert classificar_tipo_evento(GeoInfo(proxy=True, mobile=True)) == TipoEvento.PROXY

    def test_mobile(self):
        assert classificar_tipo_evento(GeoInfo(mobile=True)) == TipoEvento.MOBILE

    def test_demais_casos_sao_hosting(self):
        assert classificar_tipo_evento(GeoInfo(hosting=True)) == TipoEvento.HOSTING
        assert classificar_tipo_evento(GeoInfo()) == TipoEvento.HOSTING
