"""
Registro de eventos do coletor: autorização → enriquecimento → gravação.
"""
from typing import List, Mapping, Optional

import structlog
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from models.dominio_projeto import DominioProjeto
from models.evento import Evento
from models.projeto import Projeto
from schemas.evento import ColetaEventoRequest
from services.autorizacao_service import VereditoAutorizacao, autorizar_coleta
from services.geolocalizacao_service import GeoInfo, GeolocalizacaoService, classificar_tipo_evento
from utils.dominios import RegraDominio

logger = structlog.get_logger()


def buscar_projeto(db: Session, projeto_id: str) -> Optional[Projeto]:
    return db.get(Projeto, projeto_id)


def listar_regras_dominio(db: Session, projeto_id: str) -> List[RegraDominio]:
    linhas = db.query(DominioProjeto).filter(DominioProjeto.projeto_id == projeto_id).all()
    return [RegraDominio.model_validate(linha) for linha in linhas]


class ColetaService:
    def __init__(self, db: Session, geolocalizacao: GeolocalizacaoService):
        self.db = db
        self.geolocalizacao = geolocalizacao

    def autorizar(
        self,
        headers: Mapping[str, str],
        url_requisicao: str,
        projeto_id: str,
    ) -> VereditoAutorizacao:
        return autorizar_coleta(
            headers,
            url_requisicao,
            projeto_id,
            buscar_projeto=lambda pid: buscar_projeto(self.db, pid),
            listar_regras=lambda pid: listar_regras_dominio(self.db, pid),
        )

    async def registrar_evento(self, payload: ColetaEventoRequest, endereco_ip: str) -> Evento:
        geo = await self.geolocalizacao.consultar(endereco_ip)
        evento = await run_in_threadpool(self._gravar_evento, payload, endereco_ip, geo)

        logger.info(
            "Evento registrado",
            evento_id=evento.id,
            projeto_id=evento.projeto_id,
            tipo=evento.tipo,
            enriquecido=geo is not None,
        )
        return evento

    def _gravar_evento(self, payload: ColetaEventoRequest, endereco_ip: str, geo: Optional[GeoInfo]) -> Evento:
        evento = Evento(
            projeto_id=payload.projeto_id,
            ocorrido_em=payload.ocorrido_em,
            endereco_ip=endereco_ip,
            tipo=classificar_tipo_evento(geo),
        )
        if geo is not None:
            evento.lat = geo.lat
            evento.lon = geo.lon
            evento.pais = geo.country
            evento.regiao = geo.region_name
            evento.cidade = geo.city
            evento.cep = geo.zip
            evento.provedor = geo.isp
            evento.nome_as = geo.as_name

        self.db.add(evento)
        self.db.commit()
        self.db.refresh(evento)
        return evento
