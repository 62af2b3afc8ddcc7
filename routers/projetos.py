# routers/projetos.py
# -*- coding: utf-8 -*-
from datetime import timedelta
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session
import structlog

from config import settings
from database import get_db
from models.evento import Evento
from models.projeto import Projeto as ProjetoModel, agora_utc
from schemas.projeto import OperacaoOk, Projeto, ProjetoCreate, ProjetoResumo, ProjetoUpdate
from services.geolocalizacao_service import TipoEvento

logger = structlog.get_logger()
router = APIRouter(prefix="/projetos", tags=["Projetos"])

JANELA_RESUMO = timedelta(days=30)


def obter_projeto_ou_404(db: Session, projeto_id: str) -> ProjetoModel:
    projeto = db.get(ProjetoModel, projeto_id)
    if not projeto:
        raise HTTPException(status_code=404, detail="Projeto não encontrado")
    return projeto


# ============================ GET (listar) ============================
@router.get("/", response_model=List[Projeto], summary="Listar projetos")
def listar_projetos(db: Session = Depends(get_db)):
    return db.query(ProjetoModel).order_by(ProjetoModel.criado_em.desc()).all()


# ============================ POST (criar) ============================
@router.post("/", response_model=Projeto, status_code=status.HTTP_201_CREATED, summary="Criar projeto")
def criar_projeto(projeto: ProjetoCreate, db: Session = Depends(get_db)):
    novo = ProjetoModel(nome=projeto.nome)
    db.add(novo)
    db.commit()
    db.refresh(novo)
    logger.info("Projeto criado", projeto_id=novo.id)
    return novo


# ============================ GET (por id) ============================
@router.get("/{projeto_id}", response_model=Projeto, summary="Obter projeto por ID")
def obter_projeto(projeto_id: str, db: Session = Depends(get_db)):
    return obter_projeto_ou_404(db, projeto_id)


# ============================ PUT (renomear) ============================
@router.put("/{projeto_id}", response_model=Projeto, summary="Renomear projeto")
def renomear_projeto(projeto_id: str, payload: ProjetoUpdate, db: Session = Depends(get_db)):
    projeto = obter_projeto_ou_404(db, projeto_id)
    projeto.nome = payload.nome
    db.commit()
    db.refresh(projeto)
    return projeto


# ============================ DELETE ============================
@router.delete("/{projeto_id}", response_model=OperacaoOk, summary="Excluir projeto (com domínios e eventos)")
def excluir_projeto(projeto_id: str, db: Session = Depends(get_db)):
    """
    Idempotente: projeto inexistente também devolve success=true.
    Domínios e eventos saem junto (cascade no relacionamento).
    """
    projeto = db.get(ProjetoModel, projeto_id)
    if projeto:
        db.delete(projeto)
        db.commit()
        logger.info("Projeto excluido", projeto_id=projeto_id)
    return OperacaoOk()


# ============================ GET (resumo) ============================
@router.get("/{projeto_id}/resumo", response_model=ProjetoResumo, summary="Resumo dos últimos 30 dias")
def resumo_projeto(projeto_id: str, db: Session = Depends(get_db)):
    projeto = obter_projeto_ou_404(db, projeto_id)
    desde = agora_utc() - JANELA_RESUMO

    base = db.query(Evento).filter(Evento.projeto_id == projeto.id, Evento.ocorrido_em >= desde)

    total = base.count()
    mobile = base.filter(Evento.tipo == TipoEvento.MOBILE).count()
    ips_unicos = base.with_entities(func.count(func.distinct(Evento.endereco_ip))).scalar() or 0

    return ProjetoResumo(
        projeto_id=projeto.id,
        nome=projeto.nome,
        total_eventos=total,
        eventos_mobile=mobile,
        ips_unicos=ips_unicos,
        collector_origin=settings.COLLECTOR_ORIGIN,
        desde=desde,
    )
