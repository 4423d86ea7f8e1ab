# jobfeed/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials

# - 설정
from jobfeed.core.config import config_by_name

# - API 블루프린트
from jobfeed.api.feed.routes import feed_bp

# - 서비스 모듈
from jobfeed.services.storage_service import StorageService
from jobfeed.services.post_service import PostService
from jobfeed.services.profile_service import ProfileService
from jobfeed.feed.upload_pipeline import MediaUploadPipeline
from jobfeed.feed.drafts import DraftController, DraftStore
from jobfeed.feed.engagement import EngagementMutator


def _init_firebase(app: Flask):
    # Firebase 앱은 프로세스당 한 번만 초기화되고 종료되지 않음
    if firebase_admin._apps:
        return
    cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
    cred = credentials.Certificate(cred_path)
    firebase_admin.initialize_app(cred, {
        'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
    })


def create_app(config_name=None, services=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development', 'testing', 'production' 중 하나. 없으면 FLASK_ENV를 사용합니다.
    :param services: 외부 협력 서비스('storage', 'posts', 'profiles')를 직접 주입할 때 사용합니다.
                     주입된 서비스가 있으면 Firebase 초기화를 건너뜁니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    JWTManager(app)

    app.services = {}
    if services:
        app.services.update(services)
    else:
        _init_firebase(app)

        # 4-1. 다른 서비스의 기반이 되는 외부 협력 서비스 먼저 생성
        try:
            storage_instance = StorageService()
            storage_instance.init_app(app)
            app.services['storage'] = storage_instance
            logging.info("Storage service initialized successfully")
        except Exception as e:
            logging.error(f"Failed to initialize storage service: {e}")
            raise

        try:
            post_instance = PostService()
            post_instance.init_app(app)
            app.services['posts'] = post_instance
            logging.info("Post service initialized successfully")
        except Exception as e:
            logging.error(f"Failed to initialize post service: {e}")
            raise

        profile_instance = ProfileService()
        profile_instance.init_app(app)
        app.services['profiles'] = profile_instance

    # =====================================================================================
    # 5. 피드 핵심 로직 구성 (의존성 주입)
    # =====================================================================================
    refresh_hint = app.config['FEED_REVALIDATE_PATH']
    pipeline = MediaUploadPipeline(
        app.services['storage'],
        prefix=app.config['FEED_STORAGE_PREFIX'],
        cache_control=app.config['FEED_CACHE_CONTROL'],
    )
    app.services['upload_pipeline'] = pipeline
    app.services['drafts'] = DraftStore()
    app.services['draft_controller'] = DraftController(app.services['posts'], pipeline, refresh_hint=refresh_hint)
    app.services['engagement'] = EngagementMutator(app.services['posts'], refresh_hint=refresh_hint)

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(feed_bp, url_prefix='/api/feed')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # HTTP 예외(404, 405 등)는 Flask 기본 응답을 그대로 사용
        if isinstance(err, HTTPException):
            return err
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
