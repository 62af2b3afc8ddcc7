# utils/host_utils.py
from typing import Dict, Mapping, Optional
from urllib.parse import urlsplit


def cabecalhos_minusculos(headers: Mapping[str, str]) -> Dict[str, str]:
    """
    Headers do Starlette já são case-insensitive; dicts comuns (testes, workers) não.
    Com cabeçalho repetido vale a primeira ocorrência, como em Headers.get().
    """
    cabecalhos: Dict[str, str] = {}
    for nome, valor in headers.items():
        cabecalhos.setdefault(str(nome).lower(), valor)
    return cabecalhos


def hostname_da_url(valor: Optional[str]) -> Optional[str]:
    """Hostname de uma URL absoluta; None se vazia, malformada ou sem host."""
    if not valor:
        return None
    try:
        host = urlsplit(valor.strip()).hostname
    except ValueError:
        # ex.: colchete de IPv6 sem fechar
        return None
    return host or None


def resolver_hostname(headers: Mapping[str, str], url_requisicao: Optional[str]) -> Optional[str]:
    """
    Hostname de onde a requisição diz vir.

    Prioridade: Origin → Referer → URL da própria requisição. O script roda
    embutido em páginas de terceiros, então Origin/Referer refletem a página
    real; a URL da requisição é o endereço do próprio coletor (último recurso).
    Fonte ausente ou que não parseia cai para a próxima.
    """
    cabecalhos = cabecalhos_minusculos(headers)

    for candidato in (cabecalhos.get("origin"), cabecalhos.get("referer"), url_requisicao):
        host = hostname_da_url(candidato)
        if host:
            return host
    return None
