# jobfeed/api/feed/routes.py
import logging
import posixpath
from flask import Blueprint, request, jsonify, Response, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError as SchemaValidationError

from jobfeed.api.feed.schemas import DraftUpdateSchema, DraftResponseSchema, PostResponseSchema
from jobfeed.core.errors import (
    OperationInFlightError, PersistenceError, PostNotFoundError, UploadError, ValidationError,
)
from jobfeed.feed.upload_pipeline import UploadOutcome
from jobfeed.models.draft import PendingFile


feed_bp = Blueprint('feed_bp', __name__)


def _dump_post(post, user_id):
    data = PostResponseSchema().dump(post)
    data['is_liked'] = post.is_liked_by(user_id)
    return data


def _dump_draft(draft):
    with draft.lock:
        return DraftResponseSchema().dump(draft)


def _upload_filename(upload):
    """경로 구분자만 제거한 원본 파일명. 한글 등 비ASCII 문자는 그대로 유지합니다."""
    if upload is None or not upload.filename:
        return ''
    name = posixpath.basename(upload.filename.replace('\\', '/')).strip()
    return '' if name in ('.', '..') else name


def _draft_not_found():
    return jsonify({"error_code": "DRAFT_NOT_FOUND", "message": "작성 중인 게시물이 없습니다."}), 404


async def _current_session():
    profile_service = current_app.services['profiles']
    return await profile_service.resolve_session(get_jwt_identity())


@feed_bp.route('/posts', methods=['GET'])
@jwt_required()
async def get_feed_posts():
    """
    피드 게시물 전체를 최신순으로 조회합니다. (페이지네이션 없음)
    각 게시물에 요청자의 좋아요 여부(is_liked)를 포함합니다.
    """
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        posts = await post_service.list_posts()
    except PersistenceError as e:
        return jsonify({"error_code": e.error_code, "message": e.message}), 502
    return jsonify({"posts": [_dump_post(post, user_id) for post in posts]}), 200


@feed_bp.route('/draft', methods=['POST'])
@jwt_required()
def open_draft():
    """작성 다이얼로그를 열고 빈 초안을 만듭니다."""
    draft = current_app.services['drafts'].open(get_jwt_identity())
    return jsonify(_dump_draft(draft)), 201


@feed_bp.route('/draft', methods=['GET'])
@jwt_required()
def get_draft():
    draft = current_app.services['drafts'].get(get_jwt_identity())
    if draft is None:
        return _draft_not_found()
    return jsonify(_dump_draft(draft)), 200


@feed_bp.route('/draft', methods=['PATCH'])
@jwt_required()
def update_draft_message():
    """초안의 메시지를 변경합니다."""
    draft = current_app.services['drafts'].get(get_jwt_identity())
    if draft is None:
        return _draft_not_found()
    try:
        data = DraftUpdateSchema().load(request.get_json())
    except SchemaValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    current_app.services['draft_controller'].set_message(draft, data['message'])
    return jsonify(_dump_draft(draft)), 200


@feed_bp.route('/draft/image', methods=['POST'])
@jwt_required()
async def attach_draft_image():
    """
    선택한 이미지 파일을 업로드하고 공개 URL을 초안에 반영합니다.
    - 업로드 실패 시 초안에 에러 메시지가 설정되고 502를 반환합니다.
    - 공개 URL 조회 실패나 더 최신 업로드가 있는 경우 초안은 바뀌지 않습니다.
    """
    draft = current_app.services['drafts'].get(get_jwt_identity())
    if draft is None:
        return _draft_not_found()

    upload = request.files.get('file')
    filename = _upload_filename(upload)
    if not filename:
        return jsonify({"error_code": "INVALID_PARAMETERS", "message": "업로드할 파일('file')이 필요합니다."}), 400

    pending = PendingFile(
        filename=filename,
        data=upload.read(),
        content_type=upload.mimetype or "application/octet-stream",
    )
    outcome = await current_app.services['draft_controller'].attach_file(draft, pending)

    body = {"outcome": outcome.value, "draft": _dump_draft(draft)}
    if outcome == UploadOutcome.UPLOAD_FAILED:
        body.update({"error_code": UploadError.error_code, "message": UploadError().message})
        return jsonify(body), 502
    return jsonify(body), 200


@feed_bp.route('/draft/submit', methods=['POST'])
@jwt_required()
async def submit_draft():
    """
    초안으로 새 게시물을 등록합니다.
    - 성공 시 초안은 비워지고, 생성된 게시물을 201 Created로 반환합니다.
    """
    draft = current_app.services['drafts'].get(get_jwt_identity())
    if draft is None:
        return _draft_not_found()

    session = await _current_session()
    try:
        post = await current_app.services['draft_controller'].submit(draft, session)
    except ValidationError as e:
        return jsonify({"error_code": e.error_code, "message": e.message}), 400
    except OperationInFlightError as e:
        return jsonify({"error_code": e.error_code, "message": e.message}), 409
    except PersistenceError as e:
        return jsonify({"error_code": e.error_code, "message": e.message}), 502
    return jsonify(_dump_post(post, session.user_id)), 201


@feed_bp.route('/draft', methods=['DELETE'])
@jwt_required()
def discard_draft():
    """작성 다이얼로그를 닫습니다. 초안 내용과 에러가 모두 지워집니다."""
    draft = current_app.services['drafts'].close(get_jwt_identity())
    if draft is not None:
        current_app.services['draft_controller'].discard(draft)
    return Response(status=204)


@feed_bp.route('/posts/<string:post_id>/like', methods=['POST'])
@jwt_required()
async def toggle_post_like(post_id: str):
    """
    게시글의 좋아요를 누르거나 취소합니다.
    저장소의 최신 게시물 상태를 읽어 토글한 뒤 덮어씁니다.
    """
    post_service = current_app.services['posts']
    session = await _current_session()
    try:
        post = await post_service.get_post(post_id)
        if post is None:
            raise PostNotFoundError()
        updated = await current_app.services['engagement'].toggle_like(post, session)
    except PostNotFoundError as e:
        return jsonify({"error_code": e.error_code, "message": e.message}), 404
    except OperationInFlightError as e:
        return jsonify({"error_code": e.error_code, "message": e.message}), 409
    except PersistenceError as e:
        logging.warning(f"좋아요 처리 실패 (post_id: {post_id}): {e.message}")
        return jsonify({"error_code": e.error_code, "message": e.message}), 502
    return jsonify(_dump_post(updated, session.user_id)), 200
