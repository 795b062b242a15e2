import logging
import re

import requests

from archgraph.config import LLM_TIMEOUT
from archgraph.inference.base import LLMClient

logger = logging.getLogger(__name__)


class ChatCompletionsClient(LLMClient):
    def __init__(
        self,
        base_url: str,
        model: str,
        temperature: float = 0.2,
        timeout: float = LLM_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.timeout = timeout

    def generate(self, messages):
        url = f"{self.base_url}/chat/completions"
        logger.debug("POST %s model=%s", url, self.model)

        response = requests.post(
            url,
            json={
                "model": self.model,
                "messages": messages,
                "temperature": self.temperature,
            },
            timeout=self.timeout,
        )
        response.raise_for_status()

        content = response.json()["choices"][0]["message"]["content"] or ""

        # Strip markdown fences
        content = re.sub(r"^```(?:json)?\s*", "", content.strip())
        content = re.sub(r"\s*```$", "", content.strip())

        return content
