from fastapi import FastAPI
from pickem.core.config import settings
from pickem.core.log_config import configure_logging
from pickem.db.init_db import init_db
from pickem.api.routes.auth import router as auth_router
from pickem.api.routes.admin import router as admin_router
from pickem.api.routes.commissioner import router as commissioner_router
from pickem.api.routes.weeks import router as weeks_router
from pickem.api.routes.picks import router as picks_router

app = FastAPI(title="Pickem")
app.include_router(admin_router)
app.include_router(commissioner_router)
app.include_router(weeks_router)
app.include_router(picks_router)

@app.on_event("startup")
def on_startup():
    configure_logging()
    init_db()

app.include_router(auth_router)

@app.get("/health")
def health():
    return {"ok": True, "db": settings.DATABASE_URL}
