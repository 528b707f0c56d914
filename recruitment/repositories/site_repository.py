"""
Repository for sites and departments (reference data).
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.models.site import Site, Department


class SiteRepository:
    """Lookups for Site and Department."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_site(self, site_id: UUID) -> Optional[Site]:
        return await self.db.get(Site, site_id)

    async def get_department(self, department_id: UUID) -> Optional[Department]:
        return await self.db.get(Department, department_id)
