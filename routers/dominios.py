# routers/dominios.py
# -*- coding: utf-8 -*-
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import structlog

from database import get_db
from models.dominio_projeto import DominioProjeto
from routers.projetos import obter_projeto_ou_404
from schemas.dominio import DominioEntrada, DominioOut
from schemas.projeto import OperacaoOk
from utils.dominios import formatar_regra, interpretar_valor_dominio

logger = structlog.get_logger()
router = APIRouter(prefix="/projetos/{projeto_id}/dominios", tags=["Domínios"])


def _saida(dominio: DominioProjeto) -> DominioOut:
    return DominioOut(id=dominio.id, valor=formatar_regra(dominio))


# ============================ GET (listar) ============================
@router.get("/", response_model=List[DominioOut], summary="Listar domínios permitidos do projeto")
def listar_dominios(projeto_id: str, db: Session = Depends(get_db)):
    obter_projeto_ou_404(db, projeto_id)
    dominios = db.query(DominioProjeto).filter(DominioProjeto.projeto_id == projeto_id).all()
    return [_saida(d) for d in dominios]


# ============================ POST (adicionar) ============================
@router.post("/", response_model=DominioOut, status_code=status.HTTP_201_CREATED, summary="Adicionar domínio")
def adicionar_dominio(projeto_id: str, payload: DominioEntrada, db: Session = Depends(get_db)):
    """
    `*.example.com` vira hostname=example.com + wildcard=true
    (casa com example.com e qualquer subdomínio).
    """
    obter_projeto_ou_404(db, projeto_id)
    regra = interpretar_valor_dominio(payload.valor)

    dominio = DominioProjeto(projeto_id=projeto_id, hostname=regra.hostname, wildcard=regra.wildcard)
    db.add(dominio)
    db.commit()
    db.refresh(dominio)

    logger.info("Dominio adicionado", projeto_id=projeto_id, dominio=formatar_regra(dominio))
    return _saida(dominio)


# ============================ PUT (alterar) ============================
@router.put("/{dominio_id}", response_model=DominioOut, summary="Alterar domínio")
def alterar_dominio(projeto_id: str, dominio_id: str, payload: DominioEntrada, db: Session = Depends(get_db)):
    obter_projeto_ou_404(db, projeto_id)
    dominio = (
        db.query(DominioProjeto)
        .filter(DominioProjeto.id == dominio_id, DominioProjeto.projeto_id == projeto_id)
        .first()
    )
    if not dominio:
        raise HTTPException(status_code=404, detail="Domínio não encontrado")

    regra = interpretar_valor_dominio(payload.valor)
    dominio.hostname = regra.hostname
    dominio.wildcard = regra.wildcard
    db.commit()
    db.refresh(dominio)
    return _saida(dominio)


# ============================ DELETE ============================
@router.delete("/{dominio_id}", response_model=OperacaoOk, summary="Remover domínio")
def remover_dominio(projeto_id: str, dominio_id: str, db: Session = Depends(get_db)):
    obter_projeto_ou_404(db, projeto_id)
    (
        db.query(DominioProjeto)
        .filter(DominioProjeto.id == dominio_id, DominioProjeto.projeto_id == projeto_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return OperacaoOk()
