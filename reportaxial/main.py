# file: reportaxial/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reportaxial.api.v1 import api_router
from reportaxial.core.errors import ProblemServiceError
from reportaxial.core.settings import settings
from reportaxial.db.session import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("reportaxial")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("🚀 ReportAxial API pronta")
    yield


app = FastAPI(title="ReportAxial API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


# ============================================================
# Erros → JSON {"error": kind, "detail": mensagem}
# ============================================================

@app.exception_handler(ProblemServiceError)
async def problem_service_error_handler(request: Request, exc: ProblemServiceError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.detail},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
    return JSONResponse(
        status_code=400,
        content={"error": "invalid_input", "detail": f"Campos inválidos: {', '.join(fields)}"},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Erro inesperado em {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "internal", "detail": "Erro interno"},
    )


@app.get("/")
def root():
    return {"message": "API ReportAxial funcionando!"}


@app.get("/health")
def health():
    return {"status": "ok"}
