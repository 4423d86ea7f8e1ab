# jobfeed/api/feed/schemas.py
from marshmallow import Schema, fields, validate


# --- 재사용을 위한 중첩 스키마 ---
class ReactionSchema(Schema):
    """게시물 응답에 포함될 좋아요 정보 스키마."""
    reactor_user_id = fields.Str(required=True)
    reactor_user_name = fields.Str(required=True)


# --- API 요청/응답 스키마 ---

class DraftUpdateSchema(Schema):
    """PATCH /api/feed/draft 요청 본문의 유효성을 검사합니다."""
    message = fields.Str(required=True, validate=validate.Length(max=5000))


class PostResponseSchema(Schema):
    """피드 게시물 응답을 위한 최종 JSON 형식을 정의합니다."""
    post_id = fields.Str(dump_only=True)
    author_id = fields.Str(required=True)
    author_name = fields.Str(required=True)
    message = fields.Str(required=True)
    image = fields.Str(allow_none=True)
    likes = fields.List(fields.Nested(ReactionSchema), required=True)
    like_count = fields.Int(dump_only=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
    is_liked = fields.Bool(dump_only=True, dump_default=False)


class DraftResponseSchema(Schema):
    """작성 중인 초안 상태 응답."""
    message = fields.Str()
    image_url = fields.Str()
    pending_filename = fields.Method("get_pending_filename")
    error = fields.Str(allow_none=True)
    is_submittable = fields.Bool(dump_only=True)
    submitting = fields.Bool(dump_only=True)

    def get_pending_filename(self, draft):
        return draft.pending_file.filename if draft.pending_file else None
