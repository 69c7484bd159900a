"""
Service Factory
Centralizes the wiring of stores and scheduler from configuration.
"""

from cadence.application.clock import Clock
from cadence.application.config import SrsConfig
from cadence.application.scheduler import Sm2Scheduler
from cadence.application.service import SrsService
from cadence.infrastructure.adapters.json_store import JsonFileCardStore


def get_card_store(config: SrsConfig) -> JsonFileCardStore:
    """
    Returns the card store for the configured path.
    """
    return JsonFileCardStore(config.store_path)


def get_srs_service(config: SrsConfig, clock: Clock | None = None) -> SrsService:
    """
    Returns an SrsService backed by the configured store and parameters.
    """
    store = get_card_store(config)
    return SrsService(
        store=store,
        streak_store=store,
        scheduler=Sm2Scheduler(config.scheduling_parameters()),
        clock=clock,
        auto_initialize=config.auto_initialize,
    )
