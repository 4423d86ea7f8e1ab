# jobfeed/models/draft.py
import threading
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class PendingFile:
    """사용자가 선택한 업로드 대기 파일."""
    filename: str
    data: bytes
    content_type: str = "application/octet-stream"


@dataclass
class Draft:
    """
    작성 다이얼로그에서 편집 중인 게시물. 저장소에 직접 저장되지 않습니다.

    upload_seq는 마지막으로 시작된 업로드 흐름의 번호이고,
    submitting은 제출 요청이 처리 중인지를 나타냅니다.
    """
    message: str = ""
    image_url: str = ""
    pending_file: Optional[PendingFile] = None
    error: Optional[str] = None
    upload_seq: int = 0
    submitting: bool = False
    # 업로드 흐름과 제출 요청이 서로 다른 스레드에서 초안을 수정할 수 있음
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def is_submittable(self) -> bool:
        return bool(self.message) or bool(self.image_url)

    def reset(self):
        """입력 내용과 에러를 비웁니다. 진행 중인 업로드는 더 이상 초안에 반영되지 않습니다."""
        self.message = ""
        self.image_url = ""
        self.pending_file = None
        self.error = None
        self.upload_seq += 1
