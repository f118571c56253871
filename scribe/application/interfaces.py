from abc import ABC, abstractmethod
from typing import List

from scribe.domain.models import TranscriptRecord


class TranscriptRepositoryInterface(ABC):
    """Persistence contract for transcript records scoped by owner"""

    @abstractmethod
    async def create(self, record: TranscriptRecord) -> TranscriptRecord:
        ...

    @abstractmethod
    async def list_by_owner(self, owner_id: int) -> List[TranscriptRecord]:
        ...

    @abstractmethod
    async def delete_by_id_for_owner(self, record_id: int, owner_id: int) -> bool:
        ...
