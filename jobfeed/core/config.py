# jobfeed/core/config.py

import os


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # 피드 API 호출에 사용되는 JWT 토큰의 서명 키
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')

    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    # 업로드된 이미지가 저장될 공개 경로 접두사 (예: public/<filename>)
    FEED_STORAGE_PREFIX = os.getenv('FEED_STORAGE_PREFIX', 'public')
    # 업로드 객체의 Cache-Control max-age (초). 기본값은 1시간.
    FEED_CACHE_CONTROL = int(os.getenv('FEED_CACHE_CONTROL', 3600))
    # 게시물 생성/수정 후 무효화할 피드 뷰 경로
    FEED_REVALIDATE_PATH = os.getenv('FEED_REVALIDATE_PATH', '/feed')

    FEED_POSTS_COLLECTION = os.getenv('FEED_POSTS_COLLECTION', 'feed_posts')
    FEED_PROFILES_COLLECTION = os.getenv('FEED_PROFILES_COLLECTION', 'profiles')


class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH', Config.FIREBASE_CREDENTIALS_PATH)


class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'testing-secret-key-with-enough-length')
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET', 'jobfeed-test.appspot.com')


class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False


# FLASK_ENV 값에 따라 create_app에서 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig,
)
