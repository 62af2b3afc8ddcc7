"""
Decisão de autorização do coletor.

Fluxo linear, sem retentativas, falhando fechado no primeiro requisito ausente:

    START → IP_RESOLVED → PROJECT_FOUND → HOSTNAME_RESOLVED → DOMAIN_CHECKED
          → ADMITTED | REJECTED

O IP é extraído antes de qualquer consulta ao banco, e a lista de domínios só
é buscada depois de confirmar o projeto e resolver o hostname.
"""
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional

from pydantic import BaseModel

from utils.client_ip import extrair_ip_cliente
from utils.dominios import RegraDominio, algum_dominio_corresponde
from utils.host_utils import resolver_hostname


class MotivoRejeicao(str, Enum):
    NO_CLIENT_ADDRESS = "no_client_address"
    PROJECT_NOT_FOUND = "project_not_found"
    NO_RESOLVABLE_HOSTNAME = "no_resolvable_hostname"
    DOMAIN_NOT_ALLOWED = "domain_not_allowed"


class VereditoAutorizacao(BaseModel):
    admitido: bool
    endereco_cliente: Optional[str] = None
    hostname: Optional[str] = None
    motivo: Optional[MotivoRejeicao] = None

    @classmethod
    def rejeitar(cls, motivo: MotivoRejeicao, **contexto) -> "VereditoAutorizacao":
        return cls(admitido=False, motivo=motivo, **contexto)


BuscarProjeto = Callable[[str], Optional[Any]]
ListarRegras = Callable[[str], Iterable[RegraDominio]]


def autorizar_coleta(
    headers: Mapping[str, str],
    url_requisicao: Optional[str],
    projeto_id: str,
    buscar_projeto: BuscarProjeto,
    listar_regras: ListarRegras,
) -> VereditoAutorizacao:
    endereco = extrair_ip_cliente(headers)
    if not endereco:
        return VereditoAutorizacao.rejeitar(MotivoRejeicao.NO_CLIENT_ADDRESS)

    if buscar_projeto(projeto_id) is None:
        return VereditoAutorizacao.rejeitar(MotivoRejeicao.PROJECT_NOT_FOUND, endereco_cliente=endereco)

    hostname = resolver_hostname(headers, url_requisicao)
    if not hostname:
        return VereditoAutorizacao.rejeitar(MotivoRejeicao.NO_RESOLVABLE_HOSTNAME, endereco_cliente=endereco)

    if not algum_dominio_corresponde(hostname, listar_regras(projeto_id)):
        return VereditoAutorizacao.rejeitar(
            MotivoRejeicao.DOMAIN_NOT_ALLOWED,
            endereco_cliente=endereco,
            hostname=hostname,
        )

    return VereditoAutorizacao(admitido=True, endereco_cliente=endereco, hostname=hostname)
