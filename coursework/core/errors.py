"""애플리케이션 오류 분류

서비스 계층은 아래 예외만 발생시키며, 전달 계층(main.py 예외 처리기)이
이를 ``{code, message, details}`` JSON 봉투와 HTTP 상태 코드로 변환한다.
분류되지 않은 예외는 그대로 전파되어 INTERNAL_ERROR로 처리된다.
"""
from typing import Any, Optional


class AppError(Exception):
    """기계가 읽을 수 있는 코드를 가진 오류의 기본 클래스"""

    status_code: int = 500
    default_code: str = "INTERNAL_ERROR"
    default_message: str = "예기치 않은 오류가 발생했습니다"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Any = None
    ):
        self.code = code or self.default_code
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"code": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class NotFoundError(AppError):
    status_code = 404
    default_code = "RESOURCE_NOT_FOUND"
    default_message = "요청한 리소스를 찾을 수 없습니다"


class ForbiddenError(AppError):
    status_code = 403
    default_code = "FORBIDDEN"
    default_message = "이 작업을 수행할 권한이 없습니다"


class UnauthorizedError(AppError):
    status_code = 401
    default_code = "UNAUTHORIZED"
    default_message = "로그인이 필요합니다"


class InvalidInputError(AppError):
    status_code = 400
    default_code = "INVALID_INPUT"
    default_message = "입력값이 올바르지 않습니다"


class ConflictError(AppError):
    status_code = 409
    default_code = "CONFLICT"
    default_message = "리소스가 이미 존재합니다"


class InvalidFileTypeError(AppError):
    status_code = 400
    default_code = "INVALID_FILE_TYPE"
    default_message = "허용되지 않는 파일 형식입니다"


class FileTooLargeError(AppError):
    status_code = 400
    default_code = "FILE_TOO_LARGE"
    default_message = "파일 크기가 허용된 최대 크기를 초과했습니다"


class UploadFailedError(AppError):
    status_code = 500
    default_code = "UPLOAD_FAILED"
    default_message = "파일 업로드에 실패했습니다"


# 자주 쓰는 오류 생성 함수
def activity_not_found() -> NotFoundError:
    return NotFoundError("요청한 활동을 찾을 수 없습니다", code="ACTIVITY_NOT_FOUND")


def user_not_found() -> NotFoundError:
    return NotFoundError("요청한 사용자를 찾을 수 없습니다", code="USER_NOT_FOUND")


def submission_not_found() -> NotFoundError:
    return NotFoundError("요청한 활동 제출물을 찾을 수 없습니다", code="ACTIVITY_SUBMISSION_NOT_FOUND")


def attachment_not_found() -> NotFoundError:
    return NotFoundError("요청한 첨부파일을 찾을 수 없습니다", code="ATTACHMENT_NOT_FOUND")


def question_not_found() -> NotFoundError:
    return NotFoundError("요청한 문제를 찾을 수 없습니다", code="QUESTION_NOT_FOUND")


def question_submission_not_found() -> NotFoundError:
    return NotFoundError("요청한 답안 제출을 찾을 수 없습니다", code="QUESTION_SUBMISSION_NOT_FOUND")


def activity_item_not_found() -> NotFoundError:
    return NotFoundError("해당 문제는 이 활동의 항목이 아닙니다", code="ACTIVITY_ITEM_NOT_FOUND")


def already_submitted() -> ConflictError:
    return ConflictError("이미 이 활동에 제출했습니다", code="ACTIVITY_ALREADY_SUBMITTED")


def invalid_body() -> InvalidInputError:
    return InvalidInputError("요청 본문을 해석할 수 없습니다", code="INVALID_REQUEST_BODY")


def invalid_credentials() -> UnauthorizedError:
    return UnauthorizedError("이메일 또는 비밀번호가 올바르지 않습니다", code="INVALID_CREDENTIALS")
