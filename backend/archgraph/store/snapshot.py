import asyncio
import json
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from archgraph.config import (
    GENERATION_TIMEOUT,
    PROMPT_HISTORY_LIMIT,
    SNAPSHOT_DIR,
    STRICT_FOCUS,
)
from archgraph.generation.generator import ArchitectureGenerator
from archgraph.graph.errors import ExternalServiceError, PersistenceError, RootDeletionError
from archgraph.graph.mutation import (
    MutationResult,
    add_child_node,
    delete_node,
    edit_node,
    update_node_code,
)
from archgraph.graph.navigation import NavigationController
from archgraph.graph.normalize import normalize
from archgraph.graph.types import GraphNode, GraphView, VisualEdge, VisualNode
from archgraph.inference.prompt import CODE_MODES, DEPTH_GUIDANCE
from archgraph.store.storage import FileStorage, LocalStorage

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "archgraph.snapshot"
SNAPSHOT_VERSION = 1

DEFAULT_LEVEL = 1
DEFAULT_CODE_MODE = "none"


def _is_level(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value in DEPTH_GUIDANCE


@dataclass
class OperationResult:
    ok: bool
    message: str = ""
    view: Optional[GraphView] = None
    node_id: Optional[str] = None


class SnapshotStore:
    """
    Owner of the canonical architecture tree and everything derived from it.

    The layout, breadcrumbs and focus are recomputed wholesale after every
    change. Mutations are copy-on-write and serialized through a lock: each
    one is installed and persisted before the next one reads the tree.

    Lifecycle is explicit: `create()`, then `rehydrate()` once at startup,
    and `dispose()` when the owning session ends.
    """

    def __init__(
        self,
        storage: Optional[LocalStorage],
        generator: ArchitectureGenerator,
        history_limit: int = PROMPT_HISTORY_LIMIT,
        generation_timeout: float = GENERATION_TIMEOUT,
        strict_focus: bool = STRICT_FOCUS,
    ):
        self.storage = storage
        self.generator = generator
        # The prompt just sent is always kept
        self.history_limit = max(1, history_limit)
        self.generation_timeout = generation_timeout

        self._lock = threading.RLock()
        self._navigation = NavigationController(strict=strict_focus)

        self.architecture: Optional[GraphNode] = None
        self.nodes: List[VisualNode] = []
        self.edges: List[VisualEdge] = []
        self.breadcrumbs: List[GraphNode] = []

        self.loading = False
        self.error: Optional[str] = None

        self.last_prompt = ""
        self.prompt_history: List[str] = []
        self.documentation = ""
        self.documentation_stale = False

        self.level = DEFAULT_LEVEL
        self.code_mode = DEFAULT_CODE_MODE

    @classmethod
    def create(
        cls,
        storage: Optional[LocalStorage] = None,
        generator: Optional[ArchitectureGenerator] = None,
        **kwargs,
    ) -> "SnapshotStore":
        return cls(
            storage=storage if storage is not None else FileStorage(SNAPSHOT_DIR),
            generator=generator if generator is not None else ArchitectureGenerator(),
            **kwargs,
        )

    def dispose(self) -> None:
        """Detach from storage and drop in-memory state. Persisted data is kept."""
        with self._lock:
            self.storage = None
            self.architecture = None
            self._navigation.focus_id = None
            self._refresh()

    # ----------------------------
    # View
    # ----------------------------

    @property
    def focus_id(self) -> Optional[str]:
        return self._navigation.focus_id

    def _refresh(self) -> GraphView:
        view = self._navigation.view(self.architecture)
        self._apply(view)
        return view

    def _apply(self, view: GraphView) -> None:
        self.nodes = view.nodes
        self.edges = view.edges
        self.breadcrumbs = view.breadcrumbs

    def get_view(self) -> GraphView:
        return GraphView(
            nodes=list(self.nodes),
            edges=list(self.edges),
            breadcrumbs=list(self.breadcrumbs),
        )

    # ----------------------------
    # Tree installation
    # ----------------------------

    def load_tree(self, raw: Any) -> GraphNode:
        """Normalize `raw` and install it as the canonical tree, unfocused."""
        tree = normalize(raw)
        with self._lock:
            self.architecture = tree
            self._navigation.focus_id = None
            self.documentation = ""
            self.documentation_stale = False
            self.error = None
            self._refresh()
            self.persist()
        return tree

    def reset(self) -> None:
        with self._lock:
            self.architecture = None
            self._navigation.focus_id = None
            self.documentation = ""
            self.documentation_stale = False
            self.error = None
            self.level = DEFAULT_LEVEL
            self.code_mode = DEFAULT_CODE_MODE
            self._refresh()
            self.persist()

    def set_level(self, level: int) -> None:
        if not _is_level(level):
            raise ValueError(f"level must be 1..4, got {level!r}")
        with self._lock:
            self.level = level
            self.persist()

    def set_code_mode(self, code_mode: str) -> None:
        if code_mode not in CODE_MODES:
            raise ValueError(f"code_mode must be one of {CODE_MODES}, got {code_mode!r}")
        with self._lock:
            self.code_mode = code_mode
            self.persist()

    # ----------------------------
    # Navigation
    # ----------------------------

    def focus(self, node_id: str) -> GraphView:
        with self._lock:
            view = self._navigation.set_focus(self.architecture, node_id)
            self._apply(view)
            self.persist()
            return self.get_view()

    def back(self) -> GraphView:
        with self._lock:
            view = self._navigation.go_back(self.architecture)
            self._apply(view)
            self.persist()
            return self.get_view()

    def clear_focus(self) -> GraphView:
        with self._lock:
            view = self._navigation.clear_focus(self.architecture)
            self._apply(view)
            self.persist()
            return self.get_view()

    # ----------------------------
    # Mutations
    # ----------------------------

    def _commit(self, result: MutationResult) -> OperationResult:
        if not result.changed:
            return OperationResult(ok=False, message=result.message)

        self.architecture = result.tree
        self._navigation.focus_id = result.focus_id
        if self.documentation:
            self.documentation_stale = True
        self._refresh()
        self.persist()
        return OperationResult(ok=True, view=self.get_view(), node_id=result.node_id)

    def _no_tree(self) -> OperationResult:
        return OperationResult(ok=False, message="No architecture loaded")

    def edit(self, node_id: str, title: str, description: str) -> OperationResult:
        with self._lock:
            if self.architecture is None:
                return self._no_tree()
            return self._commit(
                edit_node(self.architecture, node_id, title, description, self.focus_id)
            )

    def edit_code(self, node_id: str, code: str) -> OperationResult:
        with self._lock:
            if self.architecture is None:
                return self._no_tree()
            return self._commit(
                update_node_code(self.architecture, node_id, code, self.focus_id)
            )

    def delete(self, node_id: str) -> OperationResult:
        with self._lock:
            if self.architecture is None:
                return self._no_tree()
            try:
                result = delete_node(self.architecture, node_id, self.focus_id)
            except RootDeletionError as e:
                logger.warning("Rejected delete: %s", e)
                return OperationResult(ok=False, message=str(e))
            return self._commit(result)

    def add_child(self, parent_id: str) -> OperationResult:
        with self._lock:
            if self.architecture is None:
                return self._no_tree()
            return self._commit(
                add_child_node(self.architecture, parent_id, self.focus_id)
            )

    # ----------------------------
    # External collaborator
    # ----------------------------

    async def _call_service(self, func, *args):
        self.loading = True
        self.error = None
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args),
                timeout=self.generation_timeout,
            )
        except asyncio.TimeoutError:
            self.error = f"Request timed out after {self.generation_timeout:g}s"
            logger.warning(self.error)
            raise ExternalServiceError(self.error) from None
        except ExternalServiceError as e:
            self.error = str(e)
            raise
        finally:
            self.loading = False

    def _remember_prompt(self, prompt: str) -> None:
        history = [p for p in self.prompt_history if p != prompt]
        self.prompt_history = [prompt] + history[: self.history_limit - 1]

    async def generate(
        self,
        prompt: str,
        level: Optional[int] = None,
        code_mode: Optional[str] = None,
    ) -> GraphView:
        """
        Ask the generation service for a new architecture and install it.

        On failure, timeout or cancellation the canonical tree is untouched.
        """
        level = self.level if level is None else level
        code_mode = self.code_mode if code_mode is None else code_mode
        if not _is_level(level):
            raise ValueError(f"level must be 1..4, got {level!r}")
        if code_mode not in CODE_MODES:
            raise ValueError(f"code_mode must be one of {CODE_MODES}, got {code_mode!r}")

        self.last_prompt = prompt
        raw = await self._call_service(self.generator.generate, prompt, level, code_mode)

        with self._lock:
            self.level = level
            self.code_mode = code_mode
            self._remember_prompt(prompt)
            self.load_tree(raw)
        return self.get_view()

    async def analyze(self, files: List[Dict[str, str]]) -> GraphView:
        raw = await self._call_service(self.generator.analyze, files)
        self.load_tree(raw)
        return self.get_view()

    async def generate_documentation(self) -> str:
        if self.architecture is None:
            return ""

        tree = self.architecture.to_dict()
        text = await self._call_service(self.generator.document, tree)

        with self._lock:
            self.documentation = text
            self.documentation_stale = False
            self.persist()
        return text

    # ----------------------------
    # Persistence
    # ----------------------------

    def serialize(self) -> str:
        return json.dumps(
            {
                "version": SNAPSHOT_VERSION,
                "architecture": self.architecture.to_dict() if self.architecture else None,
                "focus_id": self.focus_id,
                "last_prompt": self.last_prompt,
                "prompt_history": self.prompt_history[: self.history_limit],
                "documentation": self.documentation,
                "documentation_stale": self.documentation_stale,
                "level": self.level,
                "code_mode": self.code_mode,
            }
        )

    def deserialize(self, text: str) -> None:
        """
        Restore state from `serialize()` output.

        Every field is defaulted independently; a corrupt field never
        discards the others.
        """
        try:
            data = json.loads(text)
        except (TypeError, ValueError):
            logger.warning("Snapshot is not valid JSON, using defaults")
            data = {}
        if not isinstance(data, dict):
            data = {}

        raw_tree = data.get("architecture")
        focus_id = data.get("focus_id")
        last_prompt = data.get("last_prompt")
        history = data.get("prompt_history")
        documentation = data.get("documentation")
        level = data.get("level")
        code_mode = data.get("code_mode")

        with self._lock:
            self.architecture = normalize(raw_tree) if isinstance(raw_tree, dict) else None
            self._navigation.focus_id = (
                focus_id if isinstance(focus_id, str) and self.architecture else None
            )
            self.last_prompt = last_prompt if isinstance(last_prompt, str) else ""
            self.prompt_history = (
                [p for p in history if isinstance(p, str)][: self.history_limit]
                if isinstance(history, list)
                else []
            )
            self.documentation = documentation if isinstance(documentation, str) else ""
            self.documentation_stale = data.get("documentation_stale") is True
            self.level = level if _is_level(level) else DEFAULT_LEVEL
            self.code_mode = code_mode if code_mode in CODE_MODES else DEFAULT_CODE_MODE
            self._refresh()

    def persist(self) -> None:
        if self.storage is None:
            return
        try:
            self.storage.set_item(SNAPSHOT_KEY, self.serialize())
        except PersistenceError as e:
            logger.warning("Snapshot not persisted, continuing in memory: %s", e)

    def rehydrate(self) -> None:
        if self.storage is None:
            return
        try:
            text = self.storage.get_item(SNAPSHOT_KEY)
        except PersistenceError as e:
            logger.warning("Snapshot not readable, starting empty: %s", e)
            return
        if text is None:
            return
        self.deserialize(text)
        logger.info("Rehydrated snapshot (focus=%s)", self.focus_id)
