# routers/coletor.py
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
import structlog

from database import get_db
from schemas.evento import ColetaEventoRequest, ColetaEventoResponse
from services.autorizacao_service import MotivoRejeicao
from services.coleta_service import ColetaService
from services.geolocalizacao_service import GeolocalizacaoService, get_geolocalizacao_service

logger = structlog.get_logger()
router = APIRouter(tags=["Coletor"])

# Motivo de rejeição → (status HTTP, mensagem devolvida ao script)
RESPOSTAS_REJEICAO = {
    MotivoRejeicao.NO_CLIENT_ADDRESS: (status.HTTP_400_BAD_REQUEST, "IP address required"),
    MotivoRejeicao.PROJECT_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Project not found"),
    MotivoRejeicao.NO_RESOLVABLE_HOSTNAME: (status.HTTP_400_BAD_REQUEST, "Unable to determine request hostname"),
    MotivoRejeicao.DOMAIN_NOT_ALLOWED: (status.HTTP_403_FORBIDDEN, "Hostname not allowed for project"),
}

SCRIPT_COLETOR = """
(() => {
  try {
    const current = document.currentScript;
    if (!current) return;
    const projectId = current.getAttribute("data-project-id");
    if (!projectId) return;
    const payload = {
      projectId,
      timestamp: Date.now(),
    };
    const endpoint = new URL("/events", current.src).toString();
    fetch(endpoint, {
      method: "POST",
      headers: { "content-type": "application/json" },
      body: JSON.stringify(payload),
    }).catch(() => {});
  } catch {
    // nunca quebrar a página que embute o script
  }
})();
""".strip()


def _erro_payload(exc: ValidationError) -> str:
    campos = {erro["loc"][0] for erro in exc.errors() if erro.get("loc")}
    if "projectId" in campos:
        return "projectId is required"
    if "timestamp" in campos:
        return "timestamp must be a number"
    return "Invalid payload"


@router.get("/main.js", summary="Script embutível do coletor")
def script_coletor():
    return Response(
        content=SCRIPT_COLETOR,
        media_type="application/javascript; charset=utf-8",
        headers={"cache-control": "no-cache"},
    )


@router.post(
    "/events",
    response_model=ColetaEventoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar evento de visita",
    description=(
        "Endpoint público chamado pelo main.js. Valida IP do cliente, projeto e "
        "domínio de origem antes de enriquecer e gravar o evento."
    ),
)
async def registrar_evento(
    request: Request,
    db: Session = Depends(get_db),
    geolocalizacao: GeolocalizacaoService = Depends(get_geolocalizacao_service),
):
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    try:
        corpo = await request.json()
    except ValueError:
        # JSONDecodeError, UnicodeDecodeError e o limite de dígitos de int do json
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON payload")

    try:
        payload = ColetaEventoRequest.model_validate(corpo)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_erro_payload(e))

    servico = ColetaService(db, geolocalizacao)
    # Session é síncrona: consultas fora do event loop
    veredito = await run_in_threadpool(servico.autorizar, request.headers, str(request.url), payload.projeto_id)

    if not veredito.admitido:
        status_code, mensagem = RESPOSTAS_REJEICAO[veredito.motivo]
        logger.info(
            "Evento rejeitado",
            correlation_id=correlation_id,
            projeto_id=payload.projeto_id,
            motivo=veredito.motivo.value,
            hostname=veredito.hostname,
        )
        raise HTTPException(status_code=status_code, detail=mensagem)

    evento = await servico.registrar_evento(payload, veredito.endereco_cliente)
    return ColetaEventoResponse(id=evento.id)
