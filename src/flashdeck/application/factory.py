"""
Session Factory
Centralizes the logic for selecting the persistence gateway, viewport and
transition style from configuration.
"""

import logging
import random

from flashdeck.application.config import AppConfig
from flashdeck.application.repository import CardRepository
from flashdeck.application.session import ReviewSession
from flashdeck.application.transitions import (
    FadeTransition,
    InstantTransition,
    Transition,
    TransitionEngine,
)
from flashdeck.application.weighting import get_weight_function
from flashdeck.domain.errors import ConfigurationError
from flashdeck.domain.ports import PersistenceGateway, ViewPort
from flashdeck.infrastructure.credentials import load_credentials
from flashdeck.infrastructure.storage import HttpBlobGateway, LocalFileGateway, MemoryGateway
from flashdeck.infrastructure.view import HeadlessViewPort

logger = logging.getLogger(__name__)


async def get_persistence_gateway(config: AppConfig) -> PersistenceGateway:
    """
    Returns the PersistenceGateway implementation selected by config.

    Raises:
        ConfigurationError: The http backend is missing its URL or credentials.
    """
    if config.backend == "memory":
        return MemoryGateway()

    if config.backend == "http":
        if not config.blob_url:
            raise ConfigurationError("Need Connection: blob_url is not set")
        credentials = await load_credentials(config.keys_source, config.password)
        logger.info(f"Backend: http ({config.blob_url})")
        return HttpBlobGateway(config.blob_url, credentials)

    logger.info(f"Backend: file ({config.data_dir})")
    return LocalFileGateway(config.data_dir)


def get_transition(config: AppConfig) -> Transition:
    if config.transition == "fade":
        return FadeTransition(duration=config.fade_duration, fps=config.fade_fps)
    return InstantTransition()


async def open_session(
    config: AppConfig,
    view: ViewPort | None = None,
    rng: random.Random | None = None,
) -> ReviewSession:
    """
    Build a ReviewSession from config without starting it.

    Configuration errors surface here, before any collection is loaded.
    """
    gateway = await get_persistence_gateway(config)
    engine = TransitionEngine(view or HeadlessViewPort(), get_transition(config))
    return ReviewSession(
        repository=CardRepository(gateway, config.blob_key),
        engine=engine,
        weight=get_weight_function(config.weight_policy),
        tag=config.tag,
        rng=rng,
    )
