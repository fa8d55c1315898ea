"""
异常处理工具模块
提供证书业务异常定义和统一的错误响应
"""
import re
from typing import Optional

from django.conf import settings
from django.http import JsonResponse


class CertificateServiceError(Exception):
    """证书业务异常基类"""
    status_code = 500


class InvalidUserInputException(CertificateServiceError):
    """用户输入无效异常"""
    status_code = 400


class CertificateNotFound(CertificateServiceError):
    """证书不存在"""

    def __init__(self, lookup):
        super().__init__(f"certificate not found: {lookup}")


class CertificateRequestNotFound(CertificateServiceError):
    """证书申请不存在"""

    def __init__(self, request_id):
        super().__init__(f"failed to get request by id: {request_id}: record not found")


class CertificateConflictError(CertificateServiceError):
    """租户申请与现有证书或申请冲突"""
    status_code = 400


class CertificateAlreadyExists(CertificateConflictError):
    """租户已持有有效证书"""

    def __init__(self, message="certificate already exists for user"):
        super().__init__(message)


class CertificateRequestPending(CertificateConflictError):
    """租户已有待审核的申请"""

    def __init__(self, message="certificate request is pending for user"):
        super().__init__(message)


class RequestNotPending(CertificateServiceError):
    """申请已被处理，不能再次批准或拒绝"""

    def __init__(self, status):
        super().__init__(f"request is not pending, current status: {status}")


def sanitize_error_message(error_msg: str) -> str:
    """
    清理错误消息，移除敏感信息

    Args:
        error_msg: 原始错误消息

    Returns:
        清理后的错误消息
    """
    sensitive_patterns = [
        r'password\s*[:=]\s*\S+',
        r'secret\s*[:=]\s*\S+',
        r'token\s*[:=]\s*\S+',
        r'/home/\w+',
        r'\d+\.\d+\.\d+\.\d+',
    ]

    sanitized = error_msg
    for pattern in sensitive_patterns:
        sanitized = re.sub(pattern, '***', sanitized, flags=re.IGNORECASE)
    return sanitized


def error_response(error, status: Optional[int] = None) -> JsonResponse:
    """
    创建标准的错误响应

    Args:
        error: 异常对象或错误消息
        status: HTTP 状态码，不传时由异常类型决定

    Returns:
        JsonResponse: {'success': False, 'error': message}
    """
    if status is None:
        status = getattr(error, 'status_code', 500)

    message = str(error)
    if status >= 500 and not settings.DEBUG:
        message = sanitize_error_message(message)

    return JsonResponse({
        'success': False,
        'error': message
    }, status=status)
