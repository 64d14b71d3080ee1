"""
QCM Quiz Server

FastAPI server com:
- Sorteio de questoes por escola/materia
- Tentativas com snapshot congelado da chave de respostas
- Correcao no servidor e historico por usuario
- Gestao do banco de questoes e estatisticas (admin)
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

import app_state
from qcm import __version__
from qcm.admin_router import router as questions_router
from qcm.config import get_settings
from qcm.exceptions import QcmError
from qcm.logger import configure_logging, get_logger
from qcm.router import router as quiz_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = get_logger("server")


# =============================================================================
# FASTAPI APP
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage app lifecycle."""
    logger.info("Starting QCM server", environment=settings.ENVIRONMENT)
    await app_state.get_database()
    yield
    await app_state.cleanup()
    logger.info("QCM server stopped")


app = FastAPI(
    title=settings.APP_NAME,
    description="Motor de QCM: sorteio, tentativas, correcao e historico",
    version=__version__,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(QcmError)
async def qcm_error_handler(request: Request, exc: QcmError):
    if exc.status_code >= 500:
        logger.error("Erro interno", path=request.url.path, error=exc.message)
    else:
        logger.info("Requisicao rejeitada", path=request.url.path, code=exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "error": "validation_error",
            "message": "Dados de entrada invalidos",
            "details": {"errors": details},
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Erro nao tratado", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "Erro interno do servidor",
            "details": {},
        },
    )


# =============================================================================
# ROUTERS
# =============================================================================

app.include_router(quiz_router)
app.include_router(questions_router)


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================

@app.get("/")
async def root():
    """Health check."""
    return {"status": "ok", "message": f"{settings.APP_NAME} v{__version__}"}


@app.get("/health")
async def health_check():
    """Verifica conexao com o banco."""
    database = await app_state.get_database()
    try:
        async with database.session() as session:
            await session.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception as e:
        logger.error("Health check falhou", error=str(e))
        db_status = "error"

    return {
        "status": "healthy" if db_status == "ok" else "degraded",
        "database": db_status,
        "environment": settings.ENVIRONMENT,
    }


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
