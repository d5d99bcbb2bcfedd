from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from backend import config
from backend.routers import build, geodata, models

app = FastAPI(
    title="India Population Map API",
    description="Backend API for the 3-D India population map",
    version="0.1.0",
)

# ---------------------------------------------------------------------------
# CORS -- allow the viewer dev server
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(build.router)
app.include_router(geodata.router)
app.include_router(models.router)

# ---------------------------------------------------------------------------
# Static files -- serve generated GLB/STL assets
# ---------------------------------------------------------------------------
config.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/output", StaticFiles(directory=str(config.OUTPUT_DIR)), name="output")


@app.get("/")
async def root():
    return {"status": "ok", "service": "India Population Map API"}
