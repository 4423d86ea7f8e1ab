# jobfeed/utils/datetime_utils.py
"""
게시물 타임스탬프 처리를 위한 유틸리티 모듈

- 백엔드는 모든 시간을 UTC timezone-aware datetime으로 다룹니다.
- Firestore에서 읽은 값, ISO 문자열, naive datetime을 하나의 형태로 정규화합니다.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """시간 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 포맷 문자열을 UTC datetime으로 파싱

        지원 포맷:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00
        """
        if not iso_string:
            raise ValueError("빈 문자열은 파싱할 수 없습니다")
        try:
            dt = dateutil_parser.isoparse(iso_string)
        except (ValueError, OverflowError) as e:
            logger.error(f"ISO datetime 파싱 실패: {iso_string} - {e}")
            raise ValueError(f"잘못된 ISO 날짜 형식입니다: {iso_string}")
        return DateTimeUtils.ensure_utc(dt)

    @staticmethod
    def ensure_utc(dt: datetime) -> datetime:
        # timezone-naive인 경우 UTC로 가정
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def coerce(value: Any) -> Optional[datetime]:
        """
        문서에서 읽은 시간 값을 UTC datetime으로 변환합니다.
        None은 그대로 None을 반환합니다.
        """
        if value is None:
            return None
        if isinstance(value, str):
            return DateTimeUtils.parse_iso_datetime(value)
        if isinstance(value, datetime):
            # Firestore의 DatetimeWithNanoseconds도 datetime 하위 클래스
            return DateTimeUtils.ensure_utc(value)
        raise ValueError(f"시간 값으로 변환할 수 없습니다: {value!r}")

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """Firestore 저장 전 dict/list 내부의 datetime을 재귀적으로 UTC로 맞춥니다."""
        if isinstance(obj, datetime):
            return DateTimeUtils.ensure_utc(obj)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """Firestore에서 읽은 데이터의 datetime 필드를 재귀적으로 UTC로 맞춥니다."""
        if isinstance(obj, datetime):
            return DateTimeUtils.ensure_utc(obj)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.from_firestore(item) for item in obj]
        return obj

