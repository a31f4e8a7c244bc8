# app/routers/health.py

# ========================
# --- Importações ---
# ========================
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse


# ========================
# --- Configuração do Router ---
# ========================
router = APIRouter()


# ========================
# --- Rotas da API ---
# ========================
@router.get("/health", tags=["Health"])
async def health_check(request: Request):
    # Verifica o status do PostgreSQL
    db = getattr(request.app.state, "db", None)
    if db is None or not await db.check_connection():
        return JSONResponse(content={"status": "error", "message": "PostgreSQL não está disponível"}, status_code=503)

    return JSONResponse(content={"status": "ok"})
