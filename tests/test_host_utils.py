"""
Testes da resolução do hostname de origem
"""
from utils.host_utils import hostname_da_url, resolver_hostname

URL_COLETOR = "https://collector.example.net/events"


class TestResolverHostname:
    def test_origin_tem_prioridade(self):
        headers = {"Origin": "https://app.example.com", "Referer": "https://other.example.org/page"}
        assert resolver_hostname(headers, URL_COLETOR) == "app.example.com"

    def test_referer_quando_nao_ha_origin(self):
        headers = {"Referer": "https://shop.example.com/path"}
        assert resolver_hostname(headers, URL_COLETOR) == "shop.example.com"

    def test_url_da_requisicao_como_ultimo_recurso(self):
        assert resolver_hostname({}, URL_COLETOR) == "collector.example.net"

    def test_origin_malformado_cai_para_referer(self):
        headers = {"Origin": "null", "Referer": "https://shop.example.com/"}
        assert resolver_hostname(headers, URL_COLETOR) == "shop.example.com"

    def test_ipv6_sem_fechar_colchete_nao_quebra(self):
        headers = {"Origin": "http://[::1", "Referer": "not a url"}
        assert resolver_hostname(headers, URL_COLETOR) == "collector.example.net"

    def test_tudo_invalido_resulta_em_ausente(self):
        assert resolver_hostname({"Origin": "null"}, "nada") is None
        assert resolver_hostname({}, None) is None

    def test_porta_e_caixa_sao_descartadas(self):
        assert resolver_hostname({"origin": "http://App.Example.COM:8080"}, None) == "app.example.com"


class TestHostnameDaUrl:
    def test_sem_esquema_nao_tem_host(self):
        assert hostname_da_url("example.com") is None

    def test_vazio(self):
        assert hostname_da_url("") is None
        assert hostname_da_url(None) is None
