"""
page_blocks : FastAPI app
Démarrer : uvicorn page_blocks.main:app --reload --port 8001
"""
import logging

from fastapi import FastAPI

from .router import router, tools_router

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="page_blocks : Moteur de composition de blocs", version="0.3.0", docs_url="/docs")

app.include_router(router)
app.include_router(tools_router)


@app.on_event("startup")
def startup():
    from .database import init_db
    init_db()
    log.info("DB initialisée (SQLite)")


@app.get("/health")
def health():
    return {"status": "ok"}
