# models/evento.py
from sqlalchemy import Column, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.projeto import gerar_id


class Evento(Base):
    __tablename__ = "eventos"

    id = Column(String(36), primary_key=True, default=gerar_id)

    projeto_id = Column(
        String(36),
        ForeignKey("projetos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # momento informado pelo script (ms desde epoch, convertido para UTC)
    ocorrido_em = Column(DateTime(timezone=False), nullable=False, index=True)

    endereco_ip = Column(String(45), nullable=False)

    # proxy | mobile | hosting | unknown
    tipo = Column(String(20), nullable=False)

    # ----- enriquecimento (ip-api.com); tudo opcional -----
    lat = Column(Float, nullable=True)
    lon = Column(Float, nullable=True)
    pais = Column(String(100), nullable=True)
    regiao = Column(String(100), nullable=True)
    cidade = Column(String(100), nullable=True)
    cep = Column(String(20), nullable=True)
    provedor = Column(String(255), nullable=True)
    nome_as = Column(String(255), nullable=True)

    projeto = relationship("Projeto", back_populates="eventos")

    def __repr__(self) -> str:
        return f"<Evento id={self.id} projeto_id={self.projeto_id} tipo={self.tipo}>"
