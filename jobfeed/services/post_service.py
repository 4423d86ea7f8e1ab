# jobfeed/services/post_service.py
import asyncio
import logging
import uuid
from typing import List, Optional

from flask import Flask
from firebase_admin import firestore

from jobfeed.core.errors import PersistenceError
from jobfeed.models.post import Post
from jobfeed.services.feed_cache import FeedViewCache
from jobfeed.utils.datetime_utils import DateTimeUtils


class PostService:
    """
    피드 게시물의 저장을 담당하는 서비스 클래스.
    Firestore 입출력과 피드 뷰 캐시 무효화를 처리합니다.

    update_post는 버전 확인 없이 문서를 덮어씁니다 (last write wins).
    """

    def __init__(self, view_cache: Optional[FeedViewCache] = None):
        self.db = None
        self.posts_ref = None
        self.feed_path = '/feed'
        self.view_cache = view_cache or FeedViewCache()

    def init_app(self, app: Flask):
        self.db = firestore.client()
        self.posts_ref = self.db.collection(app.config['FEED_POSTS_COLLECTION'])
        self.feed_path = app.config['FEED_REVALIDATE_PATH']
        logging.info("PostService: Firestore 게시물 컬렉션이 연결되었습니다.")

    async def create_post(self, post: Post, refresh_hint: str) -> Post:
        """새 게시물에 ID와 생성 시각을 부여하여 저장하고 피드 뷰를 무효화합니다."""
        if post.is_empty:
            raise PersistenceError("메시지나 이미지가 없는 게시물은 저장할 수 없습니다.")

        timestamp = DateTimeUtils.now()
        new_post = Post(
            post_id=str(uuid.uuid4()),
            author_id=post.author_id,
            author_name=post.author_name,
            message=post.message,
            image=post.image,
            likes=list(post.likes),
            created_at=timestamp,
            updated_at=timestamp,
        )
        try:
            await asyncio.to_thread(self._set_document, new_post)
        except Exception as e:
            logging.error(f"게시물 생성 실패 (author_id: {post.author_id}): {e}", exc_info=True)
            raise PersistenceError() from e

        self.view_cache.invalidate(refresh_hint)
        return new_post

    async def update_post(self, post: Post, refresh_hint: str) -> Post:
        """게시물 문서를 전달된 상태로 덮어쓰고 피드 뷰를 무효화합니다."""
        if not post.post_id:
            raise PersistenceError("저장되지 않은 게시물은 수정할 수 없습니다.")

        updated = Post(
            post_id=post.post_id,
            author_id=post.author_id,
            author_name=post.author_name,
            message=post.message,
            image=post.image,
            likes=list(post.likes),
            created_at=post.created_at,
            updated_at=DateTimeUtils.now(),
        )
        try:
            await asyncio.to_thread(self._set_document, updated)
        except Exception as e:
            logging.error(f"게시물 수정 실패 (post_id: {post.post_id}): {e}", exc_info=True)
            raise PersistenceError() from e

        self.view_cache.invalidate(refresh_hint)
        return updated

    async def get_post(self, post_id: str) -> Optional[Post]:
        try:
            data = await asyncio.to_thread(self._get_document, post_id)
        except Exception as e:
            logging.error(f"게시물 조회 실패 (post_id: {post_id}): {e}", exc_info=True)
            raise PersistenceError() from e
        return Post.from_dict(data) if data else None

    async def list_posts(self) -> List[Post]:
        """피드 전체 게시물을 최신순으로 반환합니다. 캐시가 무효화된 경우에만 다시 읽습니다."""
        cached = self.view_cache.get(self.feed_path)
        if cached is not None:
            return cached

        try:
            documents = await asyncio.to_thread(self._stream_documents)
        except Exception as e:
            logging.error(f"피드 목록 조회 실패: {e}", exc_info=True)
            raise PersistenceError() from e

        posts = [Post.from_dict(data) for data in documents]
        self.view_cache.put(self.feed_path, posts)
        return posts

    # --- Firestore 블로킹 호출 ---
    def _set_document(self, post: Post):
        data = DateTimeUtils.for_firestore(post.to_dict())
        self.posts_ref.document(post.post_id).set(data)

    def _get_document(self, post_id: str):
        doc = self.posts_ref.document(post_id).get()
        if not doc.exists:
            return None
        return DateTimeUtils.from_firestore(doc.to_dict())

    def _stream_documents(self):
        query = self.posts_ref.order_by("created_at", direction=firestore.Query.DESCENDING)
        return [DateTimeUtils.from_firestore(doc.to_dict()) for doc in query.stream()]
