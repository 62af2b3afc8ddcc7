# utils/client_ip.py
"""
Extração do IP do cliente a partir dos cabeçalhos de proxy.

Ordem de confiança (primeiro que validar vence):
  1. CF-Connecting-IPV4  (injetado pela Cloudflare, só IPv4)
  2. CF-Connecting-IPV6  (injetado pela Cloudflare, só IPv6)
  3. CF-Connecting-IP, ou X-Forwarded-For quando o primeiro não existe:
     primeiro item da lista separada por vírgula.

Cabeçalhos genéricos podem vir do próprio cliente, então todo candidato passa
por validação estrita; lixo no cabeçalho só faz a etapa ser ignorada.
"""
import ipaddress
import re
from typing import Callable, Mapping, Optional, Tuple

from utils.host_utils import cabecalhos_minusculos

# Cada octeto 0-255, decimal sem zero à esquerda
_OCTETO = r"(?:25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)"
_IPV4_REGEX = re.compile(rf"{_OCTETO}(?:\.{_OCTETO}){{3}}", re.ASCII)

_PREFIXO_IPV4_MAPEADO = "::ffff:"


def ipv4_valido(valor: str) -> bool:
    if not isinstance(valor, str):
        return False
    return _IPV4_REGEX.fullmatch(valor) is not None


def ipv6_valido(valor: str) -> bool:
    if not isinstance(valor, str) or not valor:
        return False
    # ipaddress aceita zona (fe80::1%eth0) desde o 3.9; aqui não serve
    if "%" in valor or valor != valor.strip():
        return False
    try:
        ipaddress.IPv6Address(valor)
    except ValueError:
        return False
    return True


def ip_valido(valor: str) -> bool:
    return ipv4_valido(valor) or ipv6_valido(valor)


def _cf_ipv4(cabecalhos: dict) -> Optional[str]:
    valor = cabecalhos.get("cf-connecting-ipv4")
    if valor and ipv4_valido(valor):
        return valor
    return None


def _cf_ipv6(cabecalhos: dict) -> Optional[str]:
    valor = cabecalhos.get("cf-connecting-ipv6")
    if valor and ipv6_valido(valor):
        return valor
    return None


def _encaminhado(cabecalhos: dict) -> Optional[str]:
    valor = cabecalhos.get("cf-connecting-ip")
    if valor is None:
        valor = cabecalhos.get("x-forwarded-for")
    if not valor:
        return None

    primeiro = valor.split(",")[0].strip()

    if primeiro.lower().startswith(_PREFIXO_IPV4_MAPEADO):
        mapeado = primeiro[len(_PREFIXO_IPV4_MAPEADO):]
        if ipv4_valido(mapeado):
            return mapeado

    return primeiro if ip_valido(primeiro) else None


ETAPAS_EXTRACAO: Tuple[Callable[[dict], Optional[str]], ...] = (
    _cf_ipv4,
    _cf_ipv6,
    _encaminhado,
)


def extrair_ip_cliente(headers: Mapping[str, str]) -> Optional[str]:
    """Retorna o primeiro IP válido segundo ETAPAS_EXTRACAO, ou None."""
    cabecalhos = cabecalhos_minusculos(headers)
    for etapa in ETAPAS_EXTRACAO:
        ip = etapa(cabecalhos)
        if ip:
            return ip
    return None
