# jobfeed/core/errors.py
"""
피드 도메인에서 사용하는 예외 계층.

각 예외는 API 응답에 그대로 실리는 error_code와 사용자에게 보여줄 message를 가집니다.
"""

UPLOAD_FAILED_MESSAGE = "Failed to upload image. Please try again."
EMPTY_DRAFT_MESSAGE = "Please provide a message or an image."
PERSISTENCE_FAILED_MESSAGE = "Something went wrong while saving. Please try again."


class FeedError(Exception):
    """피드 관련 모든 예외의 기반 클래스."""
    error_code = "FEED_ERROR"
    default_message = "피드 처리 중 오류가 발생했습니다."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FeedError):
    """메시지와 이미지가 모두 없는 초안을 제출한 경우."""
    error_code = "VALIDATION_ERROR"
    default_message = EMPTY_DRAFT_MESSAGE


class UploadError(FeedError):
    """스토리지 업로드 실패. 업로드 파이프라인을 중단시킵니다."""
    error_code = "UPLOAD_FAILED"
    default_message = UPLOAD_FAILED_MESSAGE


class UrlResolutionError(FeedError):
    """업로드는 성공했지만 공개 URL 조회에 실패한 경우. 로그로만 남깁니다."""
    error_code = "URL_RESOLUTION_FAILED"
    default_message = "공개 URL을 가져오지 못했습니다."


class PersistenceError(FeedError):
    """게시물 생성/수정 저장 실패."""
    error_code = "PERSISTENCE_FAILED"
    default_message = PERSISTENCE_FAILED_MESSAGE


class OperationInFlightError(FeedError):
    """같은 초안 제출이나 같은 게시물 좋아요가 이미 처리 중인 경우."""
    error_code = "OPERATION_IN_FLIGHT"
    default_message = "이전 요청을 처리하고 있습니다. 잠시 후 다시 시도해주세요."


class PostNotFoundError(FeedError):
    error_code = "POST_NOT_FOUND"
    default_message = "게시물을 찾을 수 없습니다."
