# jobfeed/feed/engagement.py
import logging
import threading
from typing import List, Set, Tuple

from jobfeed.core.errors import OperationInFlightError, PersistenceError
from jobfeed.models.post import Post, Reaction
from jobfeed.models.user import SessionContext


def toggle_reaction(likes: List[Reaction], user_id: str, user_name: str) -> List[Reaction]:
    """
    사용자의 좋아요를 토글한 새 목록을 반환합니다. 입력 목록은 변경하지 않습니다.

    - 이미 좋아요가 있으면 제거 (나머지 순서 유지)
    - 없으면 목록 끝에 추가
    """
    updated = list(likes)
    for index, reaction in enumerate(updated):
        if reaction.reactor_user_id == user_id:
            del updated[index]
            return updated
    updated.append(Reaction(reactor_user_id=user_id, reactor_user_name=user_name))
    return updated


class EngagementMutator:
    """
    게시물 좋아요 토글을 계산하고 저장합니다.

    버전 확인 없이 읽은 상태를 기준으로 덮어쓰므로 동시 수정은 마지막 쓰기가 이깁니다.
    실패 시 자동 재시도하지 않습니다 (재시도는 토글을 두 번 적용할 수 있음).
    """

    def __init__(self, persistence, refresh_hint: str = "/feed"):
        self.persistence = persistence
        self.refresh_hint = refresh_hint
        self._in_flight: Set[Tuple[str, str]] = set()
        self._lock = threading.Lock()

    async def toggle_like(self, post: Post, session: SessionContext) -> Post:
        key = (post.post_id, session.user_id)
        with self._lock:
            if key in self._in_flight:
                raise OperationInFlightError()
            self._in_flight.add(key)

        try:
            updated = post.with_likes(toggle_reaction(post.likes, session.user_id, session.user_name))
            saved = await self.persistence.update_post(updated, self.refresh_hint)
        except PersistenceError:
            logging.error(f"좋아요 저장 실패 (post_id: {post.post_id}, user_id: {session.user_id})")
            raise
        except Exception as e:
            logging.error(f"좋아요 저장 실패 (post_id: {post.post_id}, user_id: {session.user_id}): {e}", exc_info=True)
            raise PersistenceError() from e
        finally:
            with self._lock:
                self._in_flight.discard(key)

        return saved
