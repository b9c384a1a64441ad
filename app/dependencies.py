"""Dependency providers for the FastAPI application."""

import httpx
from fastapi import Depends
from starlette.requests import HTTPConnection

from app.config import Settings, get_settings
from app.services.explanation_gateway import ExplanationGateway, ExplanationGenerator
from app.services.gemini_service import GeminiService
from app.services.pipeline import ExplanationPipeline


async def get_http_client(connection: HTTPConnection) -> httpx.AsyncClient:
    """Retrieve the shared AsyncClient from application state."""

    return connection.app.state.http_client  # type: ignore[return-value]


async def get_generator(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> ExplanationGenerator:
    """Dependency provider for the generative backend."""

    return GeminiService(client=client, settings=settings)


async def get_pipeline(
    generator: ExplanationGenerator = Depends(get_generator),
    settings: Settings = Depends(get_settings),
) -> ExplanationPipeline:
    """Dependency provider for ExplanationPipeline."""

    return ExplanationPipeline(gateway=ExplanationGateway(generator), settings=settings)
