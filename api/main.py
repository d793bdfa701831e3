"""
FastAPI Backend dla planera rozstawienia na siatce hex.

Endpoints:
    GET    /api/health              - status
    GET    /api/maps                - lista map
    POST   /api/maps/{key}          - zmiana mapy (reset sesji)
    GET    /api/grid                - stan siatki
    POST   /api/grid/place          - postaw postać
    POST   /api/grid/auto-place     - postaw na losowym kafelku
    POST   /api/grid/remove         - zdejmij postać
    POST   /api/grid/move           - przenieś
    POST   /api/grid/swap           - zamień
    POST   /api/grid/clear          - wyczyść siatkę
    PUT    /api/grid/team-size      - limit drużyny
    GET    /api/skills              - katalog umiejętności
    GET    /api/skills/targets      - cele aktywnych umiejętności
    GET    /api/skills/modifiers    - kolory i obrazki
    GET    /api/pathfinding/closest - mapa najbliższych celów
    GET    /api/pathfinding/path    - ścieżka A*
    GET    /api/pathfinding/debug   - ścieżki do najbliższych celów
    DELETE /api/pathfinding/cache   - wyczyść cache
    GET    /api/journal             - dziennik operacji
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from hexplan.core.errors import HexNotFoundError, PlannerError
from api.routers import grid, maps, skills, pathfinding, journal
from api.session_state import get_session


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown events."""
    session = get_session()
    print("🚀 Hex planner API starting...")
    print(f"🗺️  Map: {session.map_preset.key} ({session.layout.name}), seed {session.seed}")
    print("🌐 Docs at http://localhost:8000/docs")
    yield
    print("👋 Hex planner API shutting down...")


app = FastAPI(
    title="Hex Planner API",
    description="Backend API for the hex-grid team placement planner",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS - allow all origins (including file://)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HexNotFoundError)
async def hex_not_found_handler(request: Request, exc: HexNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content=exc.to_dict())


@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    return JSONResponse(status_code=400, content=exc.to_dict())


# Include API routers
app.include_router(grid.router, prefix="/api", tags=["Grid"])
app.include_router(maps.router, prefix="/api", tags=["Maps"])
app.include_router(skills.router, prefix="/api", tags=["Skills"])
app.include_router(pathfinding.router, prefix="/api", tags=["Pathfinding"])
app.include_router(journal.router, prefix="/api", tags=["Journal"])


@app.get("/api/health")
async def health():
    """API health check."""
    return {"status": "healthy", "map": get_session().map_preset.key}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
