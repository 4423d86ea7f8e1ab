# jobfeed/feed/upload_pipeline.py
"""
선택된 이미지 파일을 스토리지에 올리고 공개 URL을 초안에 반영하는 파이프라인.

업로드 -> 공개 URL 조회 -> 초안 반영 순서로 진행되며, 파일 선택 한 번에 한 번만 실행됩니다.
여러 파일을 연달아 선택하면 흐름들이 동시에 진행될 수 있으므로, 각 흐름은 시작 시점의
순번(upload_seq)을 기억하고 가장 최근 흐름만 image_url을 쓸 수 있습니다.
"""
import asyncio
import enum
import logging

from jobfeed.core.errors import UploadError, UrlResolutionError
from jobfeed.models.draft import Draft, PendingFile


class UploadOutcome(str, enum.Enum):
    COMMITTED = "committed"
    UPLOAD_FAILED = "upload_failed"
    RESOLUTION_FAILED = "resolution_failed"
    STALE = "stale"


class MediaUploadPipeline:

    def __init__(self, storage, prefix: str = "public", cache_control: int = 3600):
        """
        :param storage: upload(path, data, ...)와 get_public_url(path)를 제공하는 스토리지 서비스
        :param prefix: 업로드 경로 접두사
        :param cache_control: 업로드 객체의 캐시 유지 시간 (초)
        """
        self.storage = storage
        self.prefix = prefix.strip("/")
        self.cache_control = cache_control

    def path_for(self, filename: str) -> str:
        # 같은 파일명은 같은 경로가 되며, 덮어쓰기가 금지되어 있어 두 번째 업로드는 실패합니다.
        return f"{self.prefix}/{filename}" if self.prefix else filename

    def begin(self, draft: Draft, file: PendingFile) -> int:
        """새 업로드 흐름의 순번을 발급합니다. 이전 흐름들은 이 시점부터 stale이 됩니다."""
        with draft.lock:
            draft.upload_seq += 1
            draft.pending_file = file
            return draft.upload_seq

    async def run(self, draft: Draft, file: PendingFile) -> UploadOutcome:
        return await self._flow(draft, file, self.begin(draft, file))

    def start(self, draft: Draft, file: PendingFile) -> "asyncio.Task[UploadOutcome]":
        """
        순번을 즉시 발급하고 실행 중인 이벤트 루프에 업로드 흐름을 예약합니다.
        장기 실행 이벤트 루프 안의 호출자용이며, HTTP 요청은 요청 단위로 run을 기다립니다.
        """
        seq = self.begin(draft, file)
        return asyncio.get_running_loop().create_task(self._flow(draft, file, seq))

    async def _flow(self, draft: Draft, file: PendingFile, seq: int) -> UploadOutcome:
        path = self.path_for(file.filename)

        # 1. 업로드
        try:
            uploaded = await self.storage.upload(
                path, file.data,
                content_type=file.content_type,
                cache_control=self.cache_control,
                overwrite=False,
            )
        except Exception as e:
            logging.error(f"이미지 업로드 실패 (path: {path}): {e}")
            with draft.lock:
                if seq != draft.upload_seq:
                    return UploadOutcome.STALE
                draft.error = UploadError().message
                draft.pending_file = None
            return UploadOutcome.UPLOAD_FAILED

        # 2. 공개 URL 조회 (실패는 로그로만 남기고 사용자 에러는 설정하지 않음)
        try:
            resolved = await self.storage.get_public_url(uploaded["path"])
        except Exception as e:
            error = UrlResolutionError()
            logging.error(f"{error.error_code}: {error.message} (path: {uploaded['path']}): {e}")
            return UploadOutcome.RESOLUTION_FAILED

        # 3. 초안 반영
        with draft.lock:
            if seq != draft.upload_seq:
                logging.info(f"이전 업로드 결과를 무시합니다 (seq: {seq}, latest: {draft.upload_seq})")
                return UploadOutcome.STALE
            draft.image_url = resolved["url"]
            draft.pending_file = None
        return UploadOutcome.COMMITTED