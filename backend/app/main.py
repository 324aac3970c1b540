# app/main.py
import time
import logging
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from app.errors import internal_error_response, register_exception_handlers
from app.routers.auth import router as auth_router
from app.routers.workouts import router as workouts_router
from app.routers.exercises import router as exercises_router
from app.routers.templates import router as templates_router
from app.routers.weight import router as weight_router
from app.routers.insights import router as insights_router
from app.db import SessionLocal  # for healthz DB check
from app.settings import get_settings

log = logging.getLogger("uvicorn")
settings = get_settings()

app = FastAPI(
    title="LiftLog API",
    openapi_tags=[
        {"name": "auth", "description": "Registration, login & session cookie"},
        {"name": "workouts", "description": "Logged workouts with their exercises"},
        {"name": "exercises", "description": "Exercises and per-exercise history"},
        {"name": "templates", "description": "Reusable session templates"},
        {"name": "weight", "description": "Body weight entries & goal"},
        {"name": "insights", "description": "Progression suggestions & training volume"},
    ],
)

register_exception_handlers(app)

# CORS (relax for local dev; tighten origins in prod via env)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS.split(","),
    allow_credentials=settings.ALLOW_ORIGINS != "*",
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        # never echo the failure back to the client
        log.exception("rid=%s %s %s failed", req_id, request.method, request.url.path)
        response = internal_error_response()
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response

@app.get("/")
def root():
    return {"ok": True, "name": "LiftLog API"}

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/healthz")
def healthz():
    # Quick DB sanity check
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        log.warning("healthz: database check failed: %s", e)
        return {"status": "degraded", "error": str(e)}

@app.get("/version")
def version():
    return {"version": settings.API_VERSION}

# Routers
app.include_router(auth_router)
app.include_router(workouts_router)
app.include_router(exercises_router)
app.include_router(templates_router)
app.include_router(weight_router)
app.include_router(insights_router)
