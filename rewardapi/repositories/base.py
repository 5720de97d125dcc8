from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

SchemaType = TypeVar("SchemaType", bound=BaseModel)


class BaseRepository(Generic[SchemaType], ABC):
    """모든 리포지토리의 베이스 클래스 - Pydantic 응답 보장

    저장소 백엔드(SQL, 메모리)는 아래 추상 메서드만 구현하고,
    엔티티별 조회 메서드는 믹스인에서 이 메서드들로 조합한다.
    존재하지 않는 ID에 대한 get/update는 예외 대신 None을 반환한다.
    """

    schema_class: Type[SchemaType]

    def _to_schema(self, record: Any) -> Optional[SchemaType]:
        if record is None:
            return None
        return self.schema_class.model_validate(record)

    @abstractmethod
    async def get(self, record_id: Any, for_update: bool = False) -> Optional[SchemaType]:
        """ID로 조회"""

    @abstractmethod
    async def find_all(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[SchemaType]:
        """조건에 맞는 모든 레코드 조회"""

    @abstractmethod
    async def create(self, **fields) -> SchemaType:
        """새 레코드 생성 - ID와 타임스탬프는 저장소가 부여"""

    @abstractmethod
    async def update(self, record_id: Any, **fields) -> Optional[SchemaType]:
        """레코드 병합 업데이트 (updated_at 갱신)"""

    @abstractmethod
    async def update_if(
        self, record_id: Any, expected: Dict[str, Any], **fields
    ) -> Optional[SchemaType]:
        """expected 조건이 모두 일치할 때만 업데이트 (compare-and-swap)

        조건 불일치 또는 레코드 없음이면 None
        """

    @abstractmethod
    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """레코드 수 조회"""

    @staticmethod
    def _plain(value: Any) -> Any:
        """Enum/Pydantic 값을 저장 가능한 원시 값으로 변환"""
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, BaseModel):
            return value.model_dump(mode="json")
        return value

    def _plain_fields(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return {key: self._plain(value) for key, value in fields.items()}
