# jobfeed/services/storage_service.py
import asyncio
import logging
from typing import Dict

from flask import Flask
from firebase_admin import storage
from google.api_core import exceptions as gcloud_exceptions


class StorageService:
    """
    Firebase Storage 관련 로직을 담당하는 서비스 클래스입니다.
    피드 이미지 업로드와 공개 URL 조회 기능을 제공합니다.

    Firebase SDK 호출은 블로킹이므로 별도 스레드에서 실행하여 이벤트 루프를 막지 않습니다.
    """

    def __init__(self):
        """
        실제 버킷 객체는 init_app 메서드를 통해 주입됩니다.
        """
        self.bucket = None

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 한 번만 호출되어 Storage 버킷을 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
        if not bucket_name:
            raise ValueError("FIREBASE_STORAGE_BUCKET 설정이 .env 또는 설정 파일에 필요합니다.")

        self.bucket = storage.bucket(bucket_name)
        logging.info("StorageService: Firebase Storage 서비스가 성공적으로 초기화되었습니다.")

    def _require_bucket(self):
        if not self.bucket:
            raise RuntimeError("StorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")
        return self.bucket

    async def upload(self, path: str, data: bytes, content_type: str,
                     cache_control: int, overwrite: bool) -> Dict[str, str]:
        """
        파일을 지정된 경로에 업로드합니다.

        :param path: 버킷 내 저장 경로 (예: "public/a.png")
        :param data: 파일 내용
        :param content_type: 파일의 MIME 타입
        :param cache_control: Cache-Control max-age (초)
        :param overwrite: False이면 같은 경로에 객체가 있을 때 업로드가 실패합니다.
        :return: {"path": 저장된 경로}
        """
        bucket = self._require_bucket()
        return await asyncio.to_thread(self._upload_blocking, bucket, path, data, content_type, cache_control, overwrite)

    @staticmethod
    def _upload_blocking(bucket, path, data, content_type, cache_control, overwrite):
        blob = bucket.blob(path)
        blob.cache_control = f"public, max-age={cache_control}"
        kwargs = {}
        if not overwrite:
            # generation 0 조건: 객체가 존재하지 않을 때만 업로드 허용
            kwargs["if_generation_match"] = 0
        try:
            blob.upload_from_string(data, content_type=content_type, **kwargs)
        except gcloud_exceptions.PreconditionFailed:
            logging.warning(f"이미 존재하는 경로에 업로드 시도: {path}")
            raise FileExistsError(f"이미 존재하는 파일입니다: {path}")
        return {"path": blob.name}

    async def get_public_url(self, path: str) -> Dict[str, str]:
        """
        지정된 파일을 공개(public)로 설정하고 해당 URL을 반환합니다.

        :param path: 공개로 전환할 파일의 경로
        :return: {"url": 공개적으로 접근 가능한 URL}
        """
        bucket = self._require_bucket()
        return await asyncio.to_thread(self._public_url_blocking, bucket, path)

    @staticmethod
    def _public_url_blocking(bucket, path):
        blob = bucket.blob(path)
        if not blob.exists():
            raise FileNotFoundError(f"파일을 찾을 수 없습니다: {path}")
        blob.make_public()
        return {"url": blob.public_url}
