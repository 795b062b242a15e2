import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from archgraph.config import AI_ENABLED
from archgraph.graph.errors import ExternalServiceError
from archgraph.inference.base import LLMClient
from archgraph.inference.config import get_llm_client
from archgraph.inference.prompt import (
    CODE_MODES,
    DEPTH_GUIDANCE,
    build_analysis_messages,
    build_documentation_messages,
    build_generation_messages,
)
from archgraph.utils.json_extract import safe_load_json

logger = logging.getLogger(__name__)

MOCK_ARCHITECTURE_PATH = Path(__file__).resolve().parent / "mock_architecture.json"

MAX_ANALYZED_FILES = 50
MAX_FILE_CHARS = 8000


def load_mock_architecture() -> Dict[str, Any]:
    return json.loads(MOCK_ARCHITECTURE_PATH.read_text(encoding="utf-8"))


class ArchitectureGenerator:
    """
    Natural-language / source-code to architecture tree collaborator.

    Returns raw (untrusted) tree dicts; callers normalize them. Every
    failure of the underlying service surfaces as ExternalServiceError.
    """

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        ai_enabled: bool = AI_ENABLED,
    ):
        self.ai_enabled = ai_enabled
        self._client = client

    @property
    def client(self) -> LLMClient:
        if self._client is None:
            self._client = get_llm_client()
        return self._client

    def _complete(self, messages: List[Dict]) -> str:
        try:
            return self.client.generate(messages)
        except requests.RequestException as e:
            logger.error("LLM request failed: %s", e)
            raise ExternalServiceError(f"Generation service unavailable: {e}") from e
        except (KeyError, IndexError, ValueError) as e:
            logger.error("Malformed LLM response: %s", e)
            raise ExternalServiceError("Generation service returned a malformed response") from e

    def _complete_tree(self, messages: List[Dict]) -> Dict[str, Any]:
        data = safe_load_json(self._complete(messages))
        if not data:
            raise ExternalServiceError("Generation service did not return an architecture")
        return data

    def generate(self, prompt: str, depth_level: int = 1, code_mode: str = "none") -> Dict[str, Any]:
        if depth_level not in DEPTH_GUIDANCE:
            raise ValueError(f"depth_level must be 1..4, got {depth_level!r}")
        if code_mode not in CODE_MODES:
            raise ValueError(f"code_mode must be one of {CODE_MODES}, got {code_mode!r}")

        if not self.ai_enabled:
            logger.info("AI disabled, serving mock architecture")
            return load_mock_architecture()

        logger.info("Generating architecture (level=%s, code=%s)", depth_level, code_mode)
        return self._complete_tree(build_generation_messages(prompt, depth_level, code_mode))

    def analyze(self, files: List[Dict[str, str]]) -> Dict[str, Any]:
        if not files:
            raise ValueError("At least one file is required for analysis")

        if not self.ai_enabled:
            logger.info("AI disabled, serving mock architecture")
            return load_mock_architecture()

        if len(files) > MAX_ANALYZED_FILES:
            logger.warning("Analyzing first %d of %d files", MAX_ANALYZED_FILES, len(files))

        trimmed = [
            {
                "path": str(f.get("path", "unknown")),
                "content": str(f.get("content", ""))[:MAX_FILE_CHARS],
            }
            for f in files[:MAX_ANALYZED_FILES]
        ]
        return self._complete_tree(build_analysis_messages(trimmed))

    def document(self, tree: Dict[str, Any]) -> str:
        if not self.ai_enabled:
            return _outline(tree)

        text = self._complete(build_documentation_messages(tree)).strip()
        if not text:
            raise ExternalServiceError("Documentation service returned no text")
        return text


def _outline(tree: Dict[str, Any], level: int = 1) -> str:
    # Offline documentation: a heading per node, nested by depth
    heading = "#" * min(level, 6)
    lines = [f"{heading} {tree.get('title', 'Untitled')}"]
    if tree.get("description"):
        lines.append("")
        lines.append(tree["description"])
    for child in tree.get("children", []) or []:
        lines.append("")
        lines.append(_outline(child, level + 1))
    return "\n".join(lines)
