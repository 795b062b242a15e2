import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

LLM_BASE_URL = os.getenv("LLM_BASE_URL", "http://localhost:8001/v1")
LLM_MODEL = os.getenv("LLM_MODEL", "mistral-7b-instruct")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.2"))
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "300"))

# Without AI the generator serves the bundled mock architecture
AI_ENABLED = os.getenv("AI_ENABLED", "false").lower() == "true"

GENERATION_TIMEOUT = float(os.getenv("GENERATION_TIMEOUT", "120"))

SNAPSHOT_DIR = os.getenv("SNAPSHOT_DIR", ".archgraph")
PROMPT_HISTORY_LIMIT = int(os.getenv("PROMPT_HISTORY_LIMIT", "20"))
STRICT_FOCUS = os.getenv("STRICT_FOCUS", "false").lower() == "true"

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
