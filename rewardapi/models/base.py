from sqlalchemy import Column, DateTime
from sqlalchemy.orm import declarative_base, declared_attr

from rewardapi.utils.time_utils import utcnow

Base = declarative_base()


class TimestampMixin:
    """타임스탬프 필드를 위한 믹스인

    갱신 시각은 리포지토리에서 직접 설정한다 (단조 증가 보장).
    """

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), default=utcnow, nullable=False)

    @declared_attr
    def updated_at(cls):
        return Column(DateTime(timezone=True), default=utcnow, nullable=False)


class BaseModel(Base, TimestampMixin):
    """모든 모델의 베이스 클래스"""

    __abstract__ = True
