"""
Testes da allow-list de domínios
"""
import pytest

from utils.dominios import (
    RegraDominio,
    algum_dominio_corresponde,
    dominio_corresponde,
    formatar_regra,
    interpretar_valor_dominio,
    valor_dominio_valido,
)

EXATA = RegraDominio(hostname="example.com", wildcard=False)
CURINGA = RegraDominio(hostname="example.com", wildcard=True)


class TestDominioCorresponde:
    def test_regra_exata(self):
        assert dominio_corresponde("example.com", EXATA) is True
        assert dominio_corresponde("sub.example.com", EXATA) is False

    def test_regra_curinga_aceita_subdominios(self):
        assert dominio_corresponde("a.example.com", CURINGA) is True
        assert dominio_corresponde("a.b.example.com", CURINGA) is True

    def test_regra_curinga_aceita_o_proprio_dominio(self):
        assert dominio_corresponde("example.com", CURINGA) is True

    def test_curinga_exige_fronteira_de_ponto(self):
        assert dominio_corresponde("notexample.com", CURINGA) is False
        assert dominio_corresponde("example.com.evil.net", CURINGA) is False

    def test_ignora_espacos_e_caixa(self):
        assert dominio_corresponde(" Example.COM ", EXATA) is True
        assert dominio_corresponde("example.com", RegraDominio(hostname="  EXAMPLE.com")) is True

    def test_prefixo_literal_na_regra_e_removido(self):
        assert dominio_corresponde("example.com", RegraDominio(hostname="*.example.com", wildcard=False)) is True
        # sem a flag, subdomínio continua sem casar
        assert dominio_corresponde("a.example.com", RegraDominio(hostname="*.example.com", wildcard=False)) is False

    @pytest.mark.parametrize("hostname", ["", "   ", None])
    def test_hostname_vazio_nunca_casa(self, hostname):
        assert dominio_corresponde(hostname, CURINGA) is False

    def test_regra_vazia_nunca_casa(self):
        assert dominio_corresponde("example.com", RegraDominio(hostname="", wildcard=True)) is False
        assert dominio_corresponde("example.com", RegraDominio(hostname="*.", wildcard=True)) is False

    def test_qualquer_regra_da_lista(self):
        regras = [RegraDominio(hostname="other.org"), CURINGA]
        assert algum_dominio_corresponde("app.example.com", regras) is True
        assert algum_dominio_corresponde("evil.com", regras) is False
        assert algum_dominio_corresponde("example.com", []) is False


class TestValorDominio:
    @pytest.mark.parametrize(
        "valor",
        ["example.com", "*.example.com", "sub.example.co.uk", "localhost", "127.0.0.1", "MY-SITE.io"],
    )
    def test_valores_aceitos(self, valor):
        assert valor_dominio_valido(valor) is True

    @pytest.mark.parametrize(
        "valor",
        ["", "example", "-example.com", "exa mple.com", "*.", "**.example.com", "https://example.com", "example.c"],
    )
    def test_valores_rejeitados(self, valor):
        assert valor_dominio_valido(valor) is False

    def test_interpretar_curinga(self):
        regra = interpretar_valor_dominio("*.Example.com")
        assert regra == RegraDominio(hostname="example.com", wildcard=True)
        assert formatar_regra(regra) == "*.example.com"

    def test_interpretar_exato(self):
        regra = interpretar_valor_dominio(" Shop.Example.com ")
        assert regra == RegraDominio(hostname="shop.example.com", wildcard=False)
        assert formatar_regra(regra) == "shop.example.com"
