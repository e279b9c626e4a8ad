"""FastAPI main application."""

import logging
from typing import Any, Dict, List, Optional

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, model_validator

from .. import __version__
from ..canvas import VoronoiCanvas
from ..config import settings
from ..render.commands import Layer, PointerEvent, PointerKind, Target

# Configure logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Voronoi Cells API",
    description="Interactive Voronoi diagram with area-coded cell colors",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Single in-memory canvas; every endpoint runs on the event loop without
# awaiting, so mutations never interleave.
canvas = VoronoiCanvas()


# Request/Response models
class PointRequest(BaseModel):
    """Point to add, in canvas coordinates."""

    x: float = Field(description="X coordinate")
    y: float = Field(description="Y coordinate")


class CellResponse(BaseModel):
    """One point with its cell."""

    point_id: int
    x: float
    y: float
    area: float
    scaled_area: float
    color: str
    path: str
    polygon: Optional[List[List[float]]] = None


class DiagramResponse(BaseModel):
    """Current diagram."""

    width: float
    height: float
    cells: List[CellResponse]


class AddPointResponse(BaseModel):
    point_id: int
    diagram: DiagramResponse


class RemovePointResponse(BaseModel):
    removed: bool
    diagram: DiagramResponse


class PointerRequest(BaseModel):
    """Pointer event forwarded by the client."""

    kind: PointerKind = Field(description="Event kind: click, hover, move, out")
    x: float = Field(description="X in canvas coordinates")
    y: float = Field(description="Y in canvas coordinates")
    page_x: Optional[float] = Field(default=None, description="X in page coordinates")
    page_y: Optional[float] = Field(default=None, description="Y in page coordinates")
    target: Optional[Layer] = Field(default=None, description="Element the event hit: cell or marker")
    target_id: Optional[int] = Field(default=None, description="Point id of the element hit")

    @model_validator(mode="after")
    def check_target(self) -> "PointerRequest":
        if (self.target is None) != (self.target_id is None):
            raise ValueError("target and target_id must be given together")
        return self


class TooltipResponse(BaseModel):
    visible: bool
    text: str
    left: float
    top: float


class PointerResponse(BaseModel):
    consumed: bool
    action: str
    point_id: Optional[int] = None
    tooltip: TooltipResponse
    diagram: DiagramResponse


def get_canvas() -> VoronoiCanvas:
    return canvas


def diagram_payload() -> Dict[str, Any]:
    return get_canvas().diagram.to_dict()


# Event handlers
@app.on_event("startup")
async def startup_event():
    logger.info("Starting Voronoi Cells API",
                width=canvas.bounds.width, height=canvas.bounds.height)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Voronoi Cells API")


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Voronoi Cells API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "points": len(get_canvas().store)}


@app.get("/diagram", response_model=DiagramResponse)
async def get_diagram():
    """Get the current diagram."""
    return diagram_payload()


@app.post("/points", response_model=AddPointResponse)
async def add_point(request: PointRequest):
    """Add a point and recompute the diagram."""
    point_id = get_canvas().add_point(request.x, request.y)
    return {"point_id": point_id, "diagram": diagram_payload()}


@app.delete("/points/{point_id}", response_model=RemovePointResponse)
async def remove_point(point_id: int):
    """
    Remove a point and recompute the diagram.

    Removing an unknown point is not an error; ``removed`` is false.
    """
    removed = get_canvas().remove_point(point_id)
    return {"removed": removed, "diagram": diagram_payload()}


@app.post("/reset", response_model=DiagramResponse)
async def reset():
    """Remove every point."""
    get_canvas().reset_all()
    return diagram_payload()


@app.post("/pointer", response_model=PointerResponse)
async def pointer_event(request: PointerRequest):
    """
    Dispatch a pointer event.

    Clicks on empty canvas or on a cell add a point; clicks on a marker
    remove it. Hover, move and out on a cell drive the area tooltip.
    """
    target = None
    if request.target is not None:
        target = Target(request.target, request.target_id)

    event = PointerEvent(
        kind=request.kind,
        x=request.x,
        y=request.y,
        target=target,
        page_x=request.page_x,
        page_y=request.page_y,
    )
    current = get_canvas()
    outcome = current.handle_pointer(event)

    return {
        "consumed": outcome.consumed,
        "action": outcome.action,
        "point_id": outcome.point_id,
        "tooltip": current.tooltip.to_dict(),
        "diagram": diagram_payload(),
    }


@app.get("/svg")
async def get_svg():
    """Current surface markup."""
    return Response(content=get_canvas().surface.to_string(), media_type="image/svg+xml")


@app.get("/export")
async def export_svg():
    """Download the diagram as a standalone SVG file."""
    export = get_canvas().export_snapshot()
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
