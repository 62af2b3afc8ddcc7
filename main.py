# main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from dotenv import load_dotenv, find_dotenv
from pathlib import Path
import os
import structlog

# ========= ENV =========
DOTENV_PATH = Path(__file__).with_name(".env")
if DOTENV_PATH.exists():
    load_dotenv(dotenv_path=DOTENV_PATH)
else:
    load_dotenv(find_dotenv())

from config import settings  # noqa: E402
from database import engine, Base, fechar_conexoes  # noqa: E402
from middleware.error_handler import ErrorHandlerMiddleware  # noqa: E402

# --- Carrega models para garantir os mapeamentos/tabelas --
from models import projeto as m_projeto  # noqa: F401,E402
from models import dominio_projeto as m_dominio_projeto  # noqa: F401,E402
from models import evento as m_evento  # noqa: F401,E402

# --- Routers da aplicação ---
from routers import coletor, projetos, dominios, eventos, health  # noqa: E402

# ---------- Logging estruturado ----------
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)
logger = structlog.get_logger()

# ---------- Criação das tabelas ----------
Base.metadata.create_all(bind=engine)


def create_app() -> FastAPI:
    """
    Coletor público (/main.js, /events) + API do painel
    (projetos, domínios permitidos e eventos).
    """
    root_path = os.getenv("ROOT_PATH", "")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Coletor de visitas com allow-list de domínios por projeto.",
        debug=settings.DEBUG,
        root_path=root_path,
    )

    # Middlewares
    app.add_middleware(ErrorHandlerMiddleware)
    origens = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origens,
        # "*" com credenciais não é aceito pelos navegadores
        allow_credentials="*" not in origens,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Raiz simples
    @app.get("/")
    def read_root():
        return {"mensagem": "API online com sucesso!", "root_path": root_path}

    # Health sob /api/v1
    app.include_router(health.router, prefix="/api/v1", tags=["Health"])

    # ----------------- Routers -----------------
    app.include_router(coletor.router)
    app.include_router(projetos.router)
    app.include_router(dominios.router)
    app.include_router(eventos.router)

    # Métricas
    Instrumentator().instrument(app).expose(app)

    # Eventos
    @app.on_event("startup")
    async def startup_event():
        logger.info("Iniciando API", version=settings.app_version, environment=settings.ENVIRONMENT)

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Encerrando API")
        try:
            fechar_conexoes()
        except Exception as e:
            logger.error("Erro ao fechar conexoes de banco", error=str(e))

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.environ.get("PORT", 10000)))
