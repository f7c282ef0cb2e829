"""Pydantic schemas for file service payloads."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from common.logging_config import get_logger

logger = get_logger(__name__)


class FileRecord(BaseModel):
    """One uploaded file as returned by the list endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='ignore')

    id: str = Field(validation_alias=AliasChoices('_id', 'id'))
    filename: str
    file_url: str = Field(
        default='',
        validation_alias=AliasChoices('fileURl', 'fileUrl', 'fileURL', 'file_url'),
    )
    is_public: bool = Field(default=False, validation_alias=AliasChoices('isPublic', 'is_public'))
    share_id: Optional[str] = Field(default=None, validation_alias=AliasChoices('shareId', 'share_id'))
    created_at: datetime = Field(validation_alias=AliasChoices('createdAt', 'created_at'))

    @field_validator('share_id')
    @classmethod
    def _drop_share_id_when_private(cls, share_id: Optional[str], info: ValidationInfo) -> Optional[str]:
        # A share id is only meaningful while the file is public.
        if share_id is not None and not info.data.get('is_public', False):
            logger.warning(f"Private file {info.data.get('id')} carried a share id; ignoring it")
            return None
        return share_id

    @property
    def share_link_available(self) -> bool:
        return self.is_public and bool(self.share_id)


class MessageResponse(BaseModel):
    """Acknowledgement body returned by mutating endpoints."""

    model_config = ConfigDict(extra='allow')

    message: Optional[str] = None
