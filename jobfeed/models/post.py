# jobfeed/models/post.py
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, List, Dict, Any

from jobfeed.utils.datetime_utils import DateTimeUtils


@dataclass
class Reaction:
    """게시물 likes 배열에 저장되는 좋아요 한 건. 이름은 좋아요 시점의 스냅샷입니다."""
    reactor_user_id: str
    reactor_user_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"reactor_user_id": self.reactor_user_id, "reactor_user_name": self.reactor_user_name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reaction":
        return cls(
            reactor_user_id=data["reactor_user_id"],
            reactor_user_name=data.get("reactor_user_name") or "",
        )


@dataclass
class Post:
    """
    Firestore 피드 게시물 문서 구조를 정의하는 데이터클래스.

    - post_id는 저장소에서 생성 시 부여되며, 그 전까지는 None입니다.
    - likes는 좋아요를 누른 순서를 유지하고, 사용자당 최대 1건입니다.
    - message와 image가 동시에 비어 있는 게시물은 저장되지 않습니다.
    """
    author_id: str
    author_name: str
    message: str = ""
    image: Optional[str] = None
    likes: List[Reaction] = field(default_factory=list)
    post_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return not self.message and not self.image

    @property
    def like_count(self) -> int:
        return len(self.likes)

    def is_liked_by(self, user_id: Optional[str]) -> bool:
        return any(reaction.reactor_user_id == user_id for reaction in self.likes)

    def with_likes(self, likes: List[Reaction]) -> "Post":
        """likes만 바꾼 새 Post를 반환합니다. 원본 객체는 변경되지 않습니다."""
        return replace(self, likes=list(likes))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "post_id": self.post_id,
            "author_id": self.author_id,
            "author_name": self.author_name,
            "message": self.message,
            "image": self.image,
            "likes": [reaction.to_dict() for reaction in self.likes],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Post":
        return cls(
            post_id=data.get("post_id"),
            author_id=data["author_id"],
            author_name=data.get("author_name") or "",
            message=data.get("message") or "",
            # 이미지 없는 게시물은 빈 문자열로 저장되어 있을 수 있음
            image=data.get("image") or None,
            likes=[Reaction.from_dict(item) for item in data.get("likes") or []],
            created_at=DateTimeUtils.coerce(data.get("created_at")),
            updated_at=DateTimeUtils.coerce(data.get("updated_at")),
        )
