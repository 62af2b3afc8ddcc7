# models/projeto.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from database import Base


def gerar_id() -> str:
    return str(uuid.uuid4())


def agora_utc() -> datetime:
    # gravamos sempre UTC "naive": SQLite descarta o fuso de qualquer forma
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Projeto(Base):
    __tablename__ = "projetos"

    # UUID em texto: o id vai público no atributo data-project-id do script
    id = Column(String(36), primary_key=True, default=gerar_id)
    nome = Column(String(120), nullable=False)

    criado_em = Column(DateTime(timezone=False), nullable=False, default=agora_utc, index=True)

    # Excluir o projeto leva junto domínios e eventos
    dominios = relationship(
        "DominioProjeto",
        back_populates="projeto",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    eventos = relationship(
        "Evento",
        back_populates="projeto",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Projeto id={self.id} nome={self.nome}>"
