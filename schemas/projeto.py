# schemas/projeto.py
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProjetoBase(BaseModel):
    nome: str = Field(..., min_length=1, max_length=120)

    # Normaliza espaços antes de checar o tamanho
    @field_validator("nome", mode="before")
    @classmethod
    def _strip(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return v


class ProjetoCreate(ProjetoBase):
    pass


class ProjetoUpdate(ProjetoBase):
    """Renomear é a única alteração possível."""
    pass


class Projeto(BaseModel):
    id: str
    nome: str
    criado_em: datetime
    model_config = ConfigDict(from_attributes=True)


class ProjetoResumo(BaseModel):
    """Números dos últimos 30 dias para o painel."""
    projeto_id: str
    nome: str
    total_eventos: int
    eventos_mobile: int
    ips_unicos: int
    collector_origin: str
    desde: datetime


class OperacaoOk(BaseModel):
    success: bool = True
