import json
from typing import Dict, List

CODE_MODES = ("none", "pseudocode", "real")

SYSTEM_PROMPT = """
You decompose SOFTWARE SYSTEMS into an architecture tree as strict JSON.

Rules:
- Output ONLY valid JSON
- No markdown, no explanations
- One root node describing the whole system
- Children are ordered left to right as they should be displayed
- ids are unique kebab-case strings
- depth is 1 for the root and parent depth + 1 for every child

JSON schema (recursive):
{
  "id": "string",
  "title": "string",
  "description": "string",
  "depth": 1,
  "code": "string",
  "children": [ ...same shape... ]
}
"""

DEPTH_GUIDANCE = {
    1: "Stop at the major subsystems (depth 2).",
    2: "Break each subsystem into its components (depth 3).",
    3: "Break components into modules and services (depth 4).",
    4: "Go down to implementation units: classes, functions, handlers (depth 5).",
}

CODE_GUIDANCE = {
    "none": 'Leave "code" as an empty string for every node.',
    "pseudocode": 'For leaf nodes put short pseudocode in "code"; leave it empty elsewhere.',
    "real": 'For leaf nodes put a concise, idiomatic code snippet in "code"; leave it empty elsewhere.',
}

ANALYZE_PROMPT = """
You reverse-engineer an ARCHITECTURE TREE from source files.
Group the files into subsystems and components, then list the important
units under each component. Use the same JSON schema and rules as for
generation. Output ONLY valid JSON.
"""

DOCUMENT_PROMPT = """
You are an expert software architect.
Write long-form Markdown documentation for the architecture tree below.
Cover, in order: an overview, one section per subsystem with its
components and responsibilities, and the main data flows between them.
Keep it practical and concrete.
"""


def build_generation_messages(prompt: str, depth_level: int, code_mode: str) -> List[Dict]:
    user = (
        f"SYSTEM DESCRIPTION:\n{prompt.strip()}\n\n"
        f"DETAIL: {DEPTH_GUIDANCE[depth_level]}\n"
        f"CODE: {CODE_GUIDANCE[code_mode]}"
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user},
    ]


def build_analysis_messages(files: List[Dict[str, str]]) -> List[Dict]:
    sections = [f"### {f['path']}\n{f['content']}" for f in files]
    return [
        {"role": "system", "content": SYSTEM_PROMPT + ANALYZE_PROMPT},
        {"role": "user", "content": "SOURCE FILES:\n\n" + "\n\n".join(sections)},
    ]


def build_documentation_messages(tree: dict) -> List[Dict]:
    return [
        {"role": "system", "content": DOCUMENT_PROMPT},
        {"role": "user", "content": json.dumps(tree, indent=2)},
    ]
