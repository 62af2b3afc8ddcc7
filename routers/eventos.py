# routers/eventos.py
# -*- coding: utf-8 -*-
import csv
import io
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from database import get_db
from models.evento import Evento
from routers.projetos import obter_projeto_ou_404
from schemas.evento import COLUNAS_EXPORTACAO, EventoOut, LocalizacaoOut
from services.geolocalizacao_service import TipoEvento

router = APIRouter(prefix="/projetos/{projeto_id}", tags=["Eventos"])


def _consultar_eventos(db: Session, projeto_id: str, busca: Optional[str]):
    query = db.query(Evento).filter(Evento.projeto_id == projeto_id)
    busca = (busca or "").strip().lower()
    if busca:
        query = query.filter(Evento.endereco_ip.ilike(f"%{busca}%"))
    return query.order_by(Evento.ocorrido_em.desc())


# ============================ GET (listar) ============================
@router.get("/eventos", response_model=List[EventoOut], summary="Listar eventos do projeto")
def listar_eventos(
    projeto_id: str,
    busca: Optional[str] = Query(None, description="Trecho do IP"),
    db: Session = Depends(get_db),
):
    obter_projeto_ou_404(db, projeto_id)
    return _consultar_eventos(db, projeto_id, busca).all()


# ============================ GET (exportar CSV) ============================
@router.get("/eventos/exportar", summary="Exportar eventos em CSV")
def exportar_eventos(
    projeto_id: str,
    busca: Optional[str] = Query(None, description="Trecho do IP"),
    db: Session = Depends(get_db),
):
    obter_projeto_ou_404(db, projeto_id)
    eventos = _consultar_eventos(db, projeto_id, busca).all()

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(COLUNAS_EXPORTACAO)
    for evento in eventos:
        writer.writerow([
            evento.ocorrido_em.isoformat() if coluna == "ocorrido_em" else getattr(evento, coluna)
            for coluna in COLUNAS_EXPORTACAO
        ])
    buffer.seek(0)

    return StreamingResponse(
        iter([buffer.getvalue()]),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="eventos-{projeto_id}.csv"'},
    )


# ============================ GET (mapa) ============================
@router.get("/localizacoes", response_model=List[LocalizacaoOut], summary="Últimas visitas com coordenadas")
def listar_localizacoes(
    projeto_id: str,
    limite: int = Query(30, ge=1, le=100),
    db: Session = Depends(get_db),
):
    obter_projeto_ou_404(db, projeto_id)
    eventos = (
        db.query(Evento)
        .filter(Evento.projeto_id == projeto_id, Evento.lat.isnot(None), Evento.lon.isnot(None))
        .order_by(Evento.ocorrido_em.desc())
        .limit(limite)
        .all()
    )
    return [
        LocalizacaoOut(
            id=e.id,
            lat=e.lat,
            lon=e.lon,
            endereco_ip=e.endereco_ip,
            visitado_em=e.ocorrido_em,
            mobile=e.tipo == TipoEvento.MOBILE,
        )
        for e in eventos
    ]
