# utils/dominios.py
import re
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

_PREFIXO_CURINGA = "*."

# Mesmo formato aceito no painel: rótulos de 1-63, TLD de 2-63, total <= 253
_HOSTNAME_REGEX = re.compile(
    r"(?=.{1,253}$)(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z0-9-]{2,63}",
    re.ASCII,
)
_HOSTS_LOCAIS = ("localhost", "127.0.0.1")


class RegraDominio(BaseModel):
    """Uma entrada da allow-list: hostname sem "*." + flag de curinga."""
    hostname: str
    wildcard: bool = False

    model_config = ConfigDict(from_attributes=True, frozen=True)


def _normalizar(valor: Optional[str]) -> str:
    return (valor or "").strip().lower()


def dominio_corresponde(hostname: Optional[str], regra: RegraDominio) -> bool:
    """
    Exata: só igualdade. Curinga: o próprio domínio ou qualquer subdomínio,
    sempre com fronteira de ponto (notexample.com não casa com example.com).
    """
    host = _normalizar(hostname)
    dominio = _normalizar(regra.hostname)
    # a flag manda; o prefixo literal só é tolerado
    if dominio.startswith(_PREFIXO_CURINGA):
        dominio = dominio[len(_PREFIXO_CURINGA):]

    if not host or not dominio:
        return False

    if regra.wildcard:
        return host == dominio or host.endswith(f".{dominio}")

    return host == dominio


def algum_dominio_corresponde(hostname: Optional[str], regras: Iterable[RegraDominio]) -> bool:
    return any(dominio_corresponde(hostname, regra) for regra in regras)


# ---------------- valores digitados no painel ----------------

def valor_dominio_valido(valor: str) -> bool:
    valor = _normalizar(valor)
    if valor in _HOSTS_LOCAIS:
        return True
    if valor.startswith(_PREFIXO_CURINGA):
        valor = valor[len(_PREFIXO_CURINGA):]
        if len(valor) > 251:
            return False
    return _HOSTNAME_REGEX.fullmatch(valor) is not None


def interpretar_valor_dominio(valor: str) -> RegraDominio:
    """'*.Example.com' -> RegraDominio(hostname='example.com', wildcard=True)"""
    valor = _normalizar(valor)
    if valor.startswith(_PREFIXO_CURINGA):
        return RegraDominio(hostname=valor[len(_PREFIXO_CURINGA):], wildcard=True)
    return RegraDominio(hostname=valor, wildcard=False)


def formatar_regra(regra) -> str:
    return f"{_PREFIXO_CURINGA}{regra.hostname}" if regra.wildcard else regra.hostname
