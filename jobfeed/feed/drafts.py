# jobfeed/feed/drafts.py
import logging
import threading
from typing import Dict, Optional

from jobfeed.core.errors import OperationInFlightError, PersistenceError, ValidationError
from jobfeed.feed.upload_pipeline import MediaUploadPipeline, UploadOutcome
from jobfeed.models.draft import Draft, PendingFile
from jobfeed.models.post import Post
from jobfeed.models.user import SessionContext


class DraftStore:
    """
    사용자별 작성 초안을 보관합니다. 한 사용자당 하나의 초안만 존재합니다.
    """

    def __init__(self):
        self._drafts: Dict[str, Draft] = {}
        self._lock = threading.Lock()

    def open(self, user_id: str) -> Draft:
        """작성 다이얼로그를 열 때 새 초안을 만듭니다. 기존 초안은 버려집니다."""
        draft = Draft()
        with self._lock:
            previous = self._drafts.get(user_id)
            self._drafts[user_id] = draft
        if previous is not None:
            with previous.lock:
                previous.reset()
        return draft

    def get(self, user_id: str) -> Optional[Draft]:
        with self._lock:
            return self._drafts.get(user_id)

    def close(self, user_id: str) -> Optional[Draft]:
        with self._lock:
            return self._drafts.pop(user_id, None)


class DraftController:
    """
    초안의 제출 가능 여부를 판단하고, 제출/폐기에 따라 초안 상태를 관리합니다.
    피드 목록을 직접 다시 읽지 않으며, 저장소에 갱신 경로만 전달합니다.
    """

    def __init__(self, persistence, pipeline: MediaUploadPipeline, refresh_hint: str = "/feed"):
        self.persistence = persistence
        self.pipeline = pipeline
        self.refresh_hint = refresh_hint

    @staticmethod
    def is_submittable(draft: Draft) -> bool:
        with draft.lock:
            return draft.is_submittable

    @staticmethod
    def set_message(draft: Draft, message: str):
        with draft.lock:
            draft.message = message or ""

    async def attach_file(self, draft: Draft, file: PendingFile) -> UploadOutcome:
        """파일 선택 이벤트. image_url은 업로드 파이프라인을 통해서만 바뀝니다."""
        return await self.pipeline.run(draft, file)

    async def submit(self, draft: Draft, session: SessionContext) -> Post:
        """
        초안으로 새 게시물을 만들어 저장합니다.

        - 메시지와 이미지가 모두 없으면 ValidationError (저장소 호출 없음)
        - 같은 초안의 제출이 처리 중이면 OperationInFlightError
        - 저장 실패 시 초안에 일반 에러 메시지를 남기고 PersistenceError
        """
        with draft.lock:
            if draft.submitting:
                raise OperationInFlightError()
            if not draft.is_submittable:
                error = ValidationError()
                draft.error = error.message
                raise error
            draft.submitting = True
            post = Post(
                author_id=session.user_id,
                author_name=session.user_name,
                message=draft.message,
                image=draft.image_url or None,
                likes=[],
            )

        try:
            created = await self.persistence.create_post(post, self.refresh_hint)
        except Exception as e:
            error = e if isinstance(e, PersistenceError) else PersistenceError()
            logging.error(f"게시물 저장 실패 (author_id: {session.user_id}): {e}")
            with draft.lock:
                draft.error = error.message
                draft.submitting = False
            if error is e:
                raise
            raise error from e

        with draft.lock:
            draft.reset()
            draft.submitting = False
        logging.info(f"새 게시물 등록 (post_id: {created.post_id}, author_id: {session.user_id})")
        return created

    @staticmethod
    def discard(draft: Draft):
        """작성 다이얼로그를 제출 없이 닫을 때 초안과 에러를 비웁니다."""
        with draft.lock:
            draft.reset()
