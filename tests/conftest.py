"""
Fixtures compartilhadas: banco SQLite de teste e TestClient.
"""
import os

# precisa vir antes de importar config/database
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ.pop("REDIS_URL", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from database import Base, engine, get_db  # noqa: E402
from main import app  # noqa: E402
from services.geolocalizacao_service import GeoInfo, get_geolocalizacao_service  # noqa: E402

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


class GeolocalizacaoFake:
    """Substitui o ip-api: devolve sempre `resposta` e guarda os IPs consultados."""

    def __init__(self, resposta=None):
        self.resposta = resposta
        self.consultas = []

    async def consultar(self, ip):
        self.consultas.append(ip)
        return self.resposta


@pytest.fixture(autouse=True)
def banco_limpo():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    sessao = TestingSessionLocal()
    try:
        yield sessao
    finally:
        sessao.close()


@pytest.fixture
def geo_fake():
    fake = GeolocalizacaoFake(
        GeoInfo(
            country="Brazil",
            regionName="Sao Paulo",
            city="Sao Paulo",
            zip="01000-000",
            isp="Provedor X",
            **{"as": "AS12345 Provedor X"},
            lat=-23.55,
            lon=-46.63,
            mobile=True,
        )
    )
    app.dependency_overrides[get_geolocalizacao_service] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_geolocalizacao_service, None)


@pytest.fixture
def client(geo_fake):
    return TestClient(app)
