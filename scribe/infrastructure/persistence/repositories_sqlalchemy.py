import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from scribe.application.interfaces import TranscriptRepositoryInterface
from scribe.domain.models import TranscriptRecord
from scribe.models.transcription import Transcription
from scribe.pipelines.transcription.errors import StoreError
from scribe.services.staging import discard_file

logger = logging.getLogger(__name__)


class SQLAlchemyTranscriptRepository(TranscriptRepositoryInterface):
    """SQLAlchemy implementation of the transcript record store"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, record: TranscriptRecord) -> TranscriptRecord:
        db_record = Transcription(
            user_id=record.user_id,
            filename=record.filename,
            filepath=record.filepath,
            transcription=record.transcription,
            file_size=record.file_size,
            mime_type=record.mime_type,
            status=record.status,
            error_message=record.error_message,
            processing_time_ms=record.processing_time_ms,
        )
        self.session.add(db_record)
        try:
            await self.session.commit()
            await self.session.refresh(db_record)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StoreError(f"Failed to persist transcription: {exc}") from exc
        return TranscriptRecord.model_validate(db_record)

    async def list_by_owner(self, owner_id: int) -> List[TranscriptRecord]:
        try:
            result = await self.session.execute(
                select(Transcription)
                .where(Transcription.user_id == owner_id)
                .order_by(Transcription.created_at.desc(), Transcription.id.desc())
            )
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to load transcriptions: {exc}") from exc
        rows = result.scalars().all()
        return [TranscriptRecord.model_validate(row) for row in rows]

    async def delete_by_id_for_owner(self, record_id: int, owner_id: int) -> bool:
        try:
            result = await self.session.execute(
                select(Transcription).where(
                    Transcription.id == record_id,
                    Transcription.user_id == owner_id,
                )
            )
            db_record = result.scalar_one_or_none()
            if db_record is None:
                return False

            filepath = db_record.filepath
            await self.session.delete(db_record)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StoreError(f"Failed to delete transcription {record_id}: {exc}") from exc

        discard_file(filepath)
        logger.info("Deleted transcription id=%s owner=%s", record_id, owner_id)
        return True
