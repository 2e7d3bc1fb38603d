"""
Unit of Work Pattern - one transaction shared by the repositories of a use case

Architecture:
- UoW owns the transaction lifecycle (commit/rollback)
- Repositories obtained from the UoW share its session
- Leaving the context without commit() rolls everything back
"""

from __future__ import annotations

import abc
from types import TracebackType
from typing import TYPE_CHECKING, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from src.service.box_office.app.interface.i_booking_command_repo import IBookingCommandRepo
    from src.service.box_office.app.interface.i_booking_query_repo import IBookingQueryRepo
    from src.service.box_office.app.interface.i_event_command_repo import IEventCommandRepo
    from src.service.box_office.app.interface.i_event_query_repo import IEventQueryRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the Box Office service

    Usage:
        async with uow_factory() as uow:
            reservation = await ledger.reserve(uow=uow, event_id=..., quantity=...)
            await uow.booking_command_repo.create(booking=...)
            await uow.commit()
    """

    event_command_repo: IEventCommandRepo
    event_query_repo: IEventQueryRepo
    booking_command_repo: IBookingCommandRepo
    booking_query_repo: IBookingQueryRepo

    _committed: bool = False

    async def __aenter__(self) -> AbstractUnitOfWork:
        self._committed = False
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if not self._committed:
            await self.rollback()

    async def commit(self) -> None:
        await self._commit()
        self._committed = True

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy implementation; one AsyncSession per unit of work."""

    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self.session_factory = session_factory

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.box_office.driven_adapter.repo.booking_command_repo_impl import (
            BookingCommandRepoImpl,
        )
        from src.service.box_office.driven_adapter.repo.booking_query_repo_impl import (
            BookingQueryRepoImpl,
        )
        from src.service.box_office.driven_adapter.repo.event_command_repo_impl import (
            EventCommandRepoImpl,
        )
        from src.service.box_office.driven_adapter.repo.event_query_repo_impl import (
            EventQueryRepoImpl,
        )

        self.session = self.session_factory()

        # Repositories share the session of this unit of work
        self.event_command_repo = EventCommandRepoImpl(session=self.session)
        self.event_query_repo = EventQueryRepoImpl(session=self.session)
        self.booking_command_repo = BookingCommandRepoImpl(session=self.session)
        self.booking_query_repo = BookingQueryRepoImpl(session=self.session)

        return await super().__aenter__()

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            await self.session.close()

    async def _commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
