# models/dominio_projeto.py
from sqlalchemy import Column, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.projeto import gerar_id


class DominioProjeto(Base):
    """
    Entrada da allow-list de um projeto.
    `hostname` nunca guarda o prefixo "*."; o curinga fica na flag `wildcard`.
    """
    __tablename__ = "dominios_projeto"

    id = Column(String(36), primary_key=True, default=gerar_id)

    projeto_id = Column(
        String(36),
        ForeignKey("projetos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    hostname = Column(String(255), nullable=False, index=True)
    wildcard = Column(Boolean, nullable=False, default=False)

    projeto = relationship("Projeto", back_populates="dominios")

    def __repr__(self) -> str:
        return f"<DominioProjeto id={self.id} hostname={self.hostname} wildcard={self.wildcard}>"
