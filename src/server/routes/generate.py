"""Generation proxy endpoint."""

from __future__ import annotations

import asyncio
import logging

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from src.accounts import AuthenticatedUser
from src.worklog.exceptions import GenerationFailedError

from ..dependencies import get_current_user, get_ollama_client
from ..schemas import GenerateRequest, GenerateResponse

logger = logging.getLogger(__name__)


def register_generate_routes(app: FastAPI) -> None:
    """Register the LLM proxy so clients never hold model credentials."""

    @app.post("/api/generate", response_model=GenerateResponse)
    async def generate(
        request: GenerateRequest,
        user: AuthenticatedUser = Depends(get_current_user),
    ):
        """Forward a prompt to the model and return its raw text."""
        if not request.prompt:
            return JSONResponse(status_code=400, content={"error": "Prompt is required"})

        client = get_ollama_client()
        try:
            text = await asyncio.to_thread(client.generate_text, request.prompt, request.model)
            return GenerateResponse(text=text or "")
        except GenerationFailedError as exc:
            logger.error("Generation failed for user %s: %s", user.username, exc)
            return JSONResponse(status_code=502, content={"error": str(exc)})
        except Exception as exc:
            logger.exception("Unexpected generation error: %s", exc)
            return JSONResponse(status_code=500, content={"error": "Generation failed"})
