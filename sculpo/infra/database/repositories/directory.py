"""Profile and Service lookups used to resolve display fields."""
from __future__ import annotations

from sculpo.infra.database.models.profile import Profile
from sculpo.infra.database.models.service import Service
from sculpo.infra.database.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    model = Profile


class ServiceRepository(BaseRepository[Service]):
    model = Service
