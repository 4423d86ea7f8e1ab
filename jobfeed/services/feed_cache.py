# jobfeed/services/feed_cache.py
import logging
import threading
from typing import Dict, List, Optional

from jobfeed.models.post import Post


class FeedViewCache:
    """
    경로별로 렌더링된 피드 목록을 보관하는 프로세스 내 캐시.
    게시물 생성/수정 시 전달된 갱신 경로(refresh hint)의 항목을 무효화합니다.
    """

    def __init__(self):
        self._views: Dict[str, List[Post]] = {}
        self._lock = threading.Lock()

    def get(self, path: str) -> Optional[List[Post]]:
        with self._lock:
            posts = self._views.get(path)
            return list(posts) if posts is not None else None

    def put(self, path: str, posts: List[Post]):
        with self._lock:
            self._views[path] = list(posts)

    def invalidate(self, path: str):
        with self._lock:
            removed = self._views.pop(path, None)
        if removed is not None:
            logging.info(f"피드 뷰 캐시 무효화: {path}")

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._views
