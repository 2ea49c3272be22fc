from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from infra.database.connection import init_db, close_db
from api.routers import songs

from config import settings

# Lifespan event to handle startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()  # DuckDBの初期化 (Raw SQLによるSequence/Table作成 + Alembic)
    yield
    close_db()

app = FastAPI(title="Songbook API", description="Service to manage songs in a library.", lifespan=lifespan)

# CORS Configuration
origins = [
    f"http://localhost:{settings.FRONTEND_PORT}",
    f"http://127.0.0.1:{settings.FRONTEND_PORT}",
    f"http://localhost:{settings.SONGBOOK_PORT}",
    f"http://127.0.0.1:{settings.SONGBOOK_PORT}",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Root endpoint for health check
@app.get("/")
async def root():
    return {"message": "Songbook API is running"}

# Include Routers
app.include_router(songs.router)
