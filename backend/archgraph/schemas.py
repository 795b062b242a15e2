from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional


class GenerateRequest(BaseModel):
    prompt: str
    level: int = Field(default=1, ge=1, le=4)  # decomposition depth
    code_mode: Literal["none", "pseudocode", "real"] = "none"


class SourceFile(BaseModel):
    path: str
    content: str = ""


class AnalyzeRequest(BaseModel):
    """Source files to reverse-engineer into an architecture tree"""
    files: List[SourceFile] = []


class DocumentRequest(BaseModel):
    architecture: Dict[str, Any]


class LayoutRequest(BaseModel):
    architecture: Dict[str, Any]
    focus_id: Optional[str] = None


class DocumentResponse(BaseModel):
    documentation: str
