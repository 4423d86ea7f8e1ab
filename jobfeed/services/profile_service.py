# jobfeed/services/profile_service.py
import asyncio
import logging
from typing import Optional

from flask import Flask
from firebase_admin import firestore

from jobfeed.models.user import Profile, SessionContext


class ProfileService:
    """
    사용자 프로필 조회를 담당합니다.
    JWT에서 얻은 사용자 ID로 표시 이름을 찾아 SessionContext를 만듭니다.
    """

    def __init__(self):
        self.db = None
        self.profiles_ref = None

    def init_app(self, app: Flask):
        self.db = firestore.client()
        self.profiles_ref = self.db.collection(app.config['FEED_PROFILES_COLLECTION'])

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        doc = await asyncio.to_thread(self.profiles_ref.document(user_id).get)
        if not doc.exists:
            return None
        data = doc.to_dict()
        return Profile(
            user_id=user_id,
            candidate_name=(data.get('candidate_info') or {}).get('name'),
            recruiter_name=(data.get('recruiter_info') or {}).get('name'),
        )

    async def resolve_session(self, user_id: str) -> SessionContext:
        try:
            profile = await self.get_profile(user_id)
        except Exception as e:
            # 이름을 찾지 못해도 피드 사용은 가능해야 함
            logging.error(f"프로필 조회 실패 (user_id: {user_id}): {e}", exc_info=True)
            profile = None
        if profile is None:
            logging.warning(f"프로필이 없는 사용자입니다 (user_id: {user_id})")
        return SessionContext.from_profile(user_id, profile)
