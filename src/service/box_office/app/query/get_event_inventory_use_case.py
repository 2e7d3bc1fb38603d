from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.box_office.app.dto.inventory_dto import InventorySnapshot
from src.service.box_office.app.service.inventory_ledger import InventoryLedger


class GetEventInventoryUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory, ledger: InventoryLedger) -> None:
        self.uow_factory = uow_factory
        self.ledger = ledger

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work_factory]),
        ledger: InventoryLedger = Depends(Provide[Container.inventory_ledger]),
    ) -> Self:
        return cls(uow_factory=uow_factory, ledger=ledger)

    @Logger.io
    async def get_inventory(self, *, event_id: UUID) -> InventorySnapshot:
        async with self.uow_factory() as uow:
            return await self.ledger.snapshot(uow=uow, event_id=event_id)
