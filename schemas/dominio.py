# schemas/dominio.py
# -*- coding: utf-8 -*-
from pydantic import BaseModel, Field, field_validator

from utils.dominios import valor_dominio_valido


class DominioEntrada(BaseModel):
    """
    Valor digitado no painel: "example.com", "*.example.com",
    "localhost" ou "127.0.0.1".
    """
    valor: str = Field(..., min_length=1, max_length=255)

    @field_validator("valor")
    @classmethod
    def validar_formato(cls, v: str) -> str:
        v = v.strip().lower()
        if not valor_dominio_valido(v):
            raise ValueError("Formato de domínio inválido")
        return v


class DominioOut(BaseModel):
    id: str
    # com "*." na frente quando é curinga
    valor: str
