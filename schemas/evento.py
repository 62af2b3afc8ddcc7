# schemas/evento.py
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _como_numero(valor: Any) -> float:
    # Diferente do Number() do JavaScript, null e "" não viram 0 (epoch):
    # viram NaN e o evento é recusado com "timestamp must be a number".
    # bool é int em Python, mas não é um timestamp
    if isinstance(valor, bool):
        return math.nan
    if isinstance(valor, (int, float)):
        try:
            return float(valor)
        except OverflowError:
            # int do JSON grande demais para float
            return math.nan
    if isinstance(valor, str):
        try:
            return float(valor.strip())
        except ValueError:
            return math.nan
    return math.nan


def ms_para_datetime(ms: float) -> datetime:
    """ms desde epoch -> datetime UTC naive (levanta ValueError fora do intervalo)."""
    try:
        return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).replace(tzinfo=None)
    except (OverflowError, OSError) as e:
        raise ValueError("timestamp fora do intervalo de datas") from e


# ---------- Request do coletor ----------
class ColetaEventoRequest(BaseModel):
    """
    Corpo enviado pelo main.js: {"projectId": "...", "timestamp": 1700000000000}.
    Aceita também o legado `project_id` e timestamp numérico em string.
    """
    projeto_id: str = Field(..., alias="projectId", min_length=1)
    timestamp: float = Field(..., allow_inf_nan=False)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"projectId": "3f0c6a4e-...", "timestamp": 1700000000000}},
    )

    @model_validator(mode="before")
    @classmethod
    def normalizar_payload(cls, dados: Any) -> Any:
        if not isinstance(dados, dict):
            return dados

        projeto_id = dados.get("projectId")
        if not isinstance(projeto_id, str):
            projeto_id = dados.get("project_id")
        if not isinstance(projeto_id, str):
            projeto_id = ""

        return {"projectId": projeto_id.strip(), "timestamp": _como_numero(dados.get("timestamp"))}

    @field_validator("timestamp")
    @classmethod
    def validar_intervalo(cls, v: float) -> float:
        ms_para_datetime(v)
        return v

    @property
    def ocorrido_em(self) -> datetime:
        return ms_para_datetime(self.timestamp)


class ColetaEventoResponse(BaseModel):
    id: str


# ---------- Painel ----------
class EventoOut(BaseModel):
    id: str
    ocorrido_em: datetime
    endereco_ip: str
    tipo: str
    pais: Optional[str] = None
    regiao: Optional[str] = None
    cidade: Optional[str] = None
    cep: Optional[str] = None
    provedor: Optional[str] = None
    nome_as: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class LocalizacaoOut(BaseModel):
    id: str
    lat: float
    lon: float
    endereco_ip: str
    visitado_em: datetime
    mobile: bool


# Colunas do CSV exportado (ordem do arquivo)
COLUNAS_EXPORTACAO = (
    "id",
    "ocorrido_em",
    "endereco_ip",
    "tipo",
    "pais",
    "regiao",
    "cidade",
    "cep",
    "provedor",
    "nome_as",
    "lat",
    "lon",
)
