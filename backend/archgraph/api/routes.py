import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from archgraph.generation.generator import ArchitectureGenerator
from archgraph.graph.errors import ExternalServiceError
from archgraph.graph.navigation import NavigationController
from archgraph.graph.normalize import normalize
from archgraph.renderer.svg_renderer import render_svg
from archgraph.schemas import (
    AnalyzeRequest,
    DocumentRequest,
    DocumentResponse,
    GenerateRequest,
    LayoutRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_generator() -> ArchitectureGenerator:
    return ArchitectureGenerator()


@router.get("/health")
def health_check():
    return {"status": "ok"}


# ============================================================
# GENERATION - prompt / source files -> normalized tree
# ============================================================

@router.post("/generate")
def generate_architecture(
    request: GenerateRequest,
    generator: ArchitectureGenerator = Depends(get_generator),
):
    if not request.prompt.strip():
        raise HTTPException(status_code=400, detail="Invalid request: prompt is required")

    try:
        raw = generator.generate(request.prompt, request.level, request.code_mode)
    except ExternalServiceError as e:
        logger.error("Generation failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e)) from e

    return normalize(raw).to_dict()


@router.post("/analyze")
def analyze_sources(
    request: AnalyzeRequest,
    generator: ArchitectureGenerator = Depends(get_generator),
):
    if not request.files:
        raise HTTPException(status_code=400, detail="Invalid request: no files uploaded")

    try:
        raw = generator.analyze([f.model_dump() for f in request.files])
    except ExternalServiceError as e:
        logger.error("Analysis failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e)) from e

    return normalize(raw).to_dict()


@router.post("/document", response_model=DocumentResponse)
def document_architecture(
    request: DocumentRequest,
    generator: ArchitectureGenerator = Depends(get_generator),
):
    tree = normalize(request.architecture)
    try:
        text = generator.document(tree.to_dict())
    except ExternalServiceError as e:
        logger.error("Documentation failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e)) from e

    return DocumentResponse(documentation=text)


# ============================================================
# VIEW - layout / export of an uploaded tree
# ============================================================

def _view(request: LayoutRequest):
    tree = normalize(request.architecture)
    navigation = NavigationController()
    if request.focus_id:
        return navigation.set_focus(tree, request.focus_id)
    return navigation.view(tree)


@router.post("/layout")
def layout_architecture(request: LayoutRequest):
    return _view(request).to_dict()


@router.post("/render/svg")
def render_architecture_svg(request: LayoutRequest):
    view = _view(request)
    return Response(
        content=render_svg(view.nodes, view.edges),
        media_type="image/svg+xml",
    )
