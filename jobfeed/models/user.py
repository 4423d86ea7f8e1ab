# jobfeed/models/user.py
from dataclasses import dataclass
from typing import Optional


@dataclass
class Profile:
    """
    Firestore 'profiles' 컬렉션의 문서 구조.
    구직자(candidate) 또는 채용 담당자(recruiter) 중 하나의 이름을 가집니다.
    """
    user_id: str
    candidate_name: Optional[str] = None
    recruiter_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.candidate_name or self.recruiter_name or ""


@dataclass(frozen=True)
class SessionContext:
    """요청을 보낸 사용자의 식별 정보. 피드 핵심 로직에는 읽기 전용으로 전달됩니다."""
    user_id: str
    user_name: str

    @classmethod
    def from_profile(cls, user_id: str, profile: Optional[Profile]) -> "SessionContext":
        return cls(user_id=user_id, user_name=profile.display_name if profile else "")
