"""
Uploaded report CRUD operations.

Dependencies: sqlalchemy, medassist.boundary.db.models
System role: Report metadata persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from medassist.boundary.db.CRUD.base_crud import BaseCRUD
from medassist.boundary.db.models.report_model import ReportModel


class ReportCRUD(BaseCRUD[ReportModel]):
    """CRUD operations for ReportModel."""

    def __init__(self) -> None:
        """Initialize ReportCRUD with ReportModel."""
        super().__init__(ReportModel)

    async def list_for_session(
        self,
        session: AsyncSession,
        session_id: UUID,
    ) -> Sequence[ReportModel]:
        """Retrieve reports of a session, oldest first."""
        stmt = (
            select(ReportModel)
            .where(ReportModel.session_id == session_id)
            .order_by(ReportModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


report_crud = ReportCRUD()
