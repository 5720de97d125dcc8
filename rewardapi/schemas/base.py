from datetime import datetime

from pydantic import BaseModel, field_validator

from rewardapi.utils.time_utils import ensure_utc


class RecordSchema(BaseModel):
    """저장소 레코드 공통 스키마 (식별자 + 타임스탬프)"""

    id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_validator("data", mode="before", check_fields=False)
    @classmethod
    def _empty_bag(cls, v):
        # JSON 컬럼이 NULL이면 빈 속성 묶음으로 취급
        return {} if v is None else v
