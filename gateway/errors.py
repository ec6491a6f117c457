"""게이트웨이 요청 처리 중 발생하는 예외 정의.

모든 예외는 GatewayError 를 상속하며, 에러 핸들러가 status_code 와 함께
``{"error": ..., "details": ...}`` 형태의 JSON 으로 변환한다.
"""


class GatewayError(Exception):
    status_code = 500

    def __init__(self, error, details=None):
        super().__init__(error)
        self.error = error
        self.details = details

    def to_dict(self):
        payload = {"error": self.error}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ClientInputError(GatewayError):
    """업로드 파일 누락, 잘못된 action 값 등"""

    status_code = 400


class ConflictError(GatewayError):
    """웹캠 중복 시작 / 실행 중이 아닐 때 중지"""

    status_code = 400


class ProcessSpawnError(GatewayError):
    """검출 프로세스를 시작하지 못한 경우"""


class ProcessExecutionError(GatewayError):
    """검출 프로세스가 0 이 아닌 코드로 종료된 경우"""


class ResultExtractionError(GatewayError):
    """결과 폴더를 읽지 못했거나 이미지가 생성되지 않은 경우"""
