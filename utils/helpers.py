"""
辅助函数模块
提供项目中常用的辅助函数
"""
import json
from typing import Optional, Any, Dict, Tuple
from django.conf import settings

from utils.error_handlers import InvalidUserInputException


def get_client_ip(request) -> Optional[str]:
    """
    获取客户端IP地址

    Args:
        request: Django请求对象

    Returns:
        str: 客户端IP地址，如果无法获取则返回None
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip


def get_setting(key: str, default: Any = None) -> Any:
    """
    获取Django设置值

    Args:
        key: 设置键名
        default: 默认值

    Returns:
        设置值或默认值
    """
    return getattr(settings, key, default)


def parse_json_body(request) -> Dict[str, Any]:
    """
    解析请求体中的JSON对象

    Raises:
        InvalidUserInputException: 请求体不是合法的JSON对象
    """
    if not request.body:
        return {}
    try:
        data = json.loads(request.body.decode('utf-8'))
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidUserInputException('Invalid JSON in request body')
    if not isinstance(data, dict):
        raise InvalidUserInputException('Request body must be a JSON object')
    return data


def get_page_params(query) -> Tuple[int, int]:
    """
    从查询参数中读取分页参数

    page 小于1时取1；per_page 小于1时取默认值，并限制最大值

    Args:
        query: request.GET

    Returns:
        (page, per_page)
    """
    default_size = get_setting('CERTIFICATE_DEFAULT_PAGE_SIZE', 20)
    max_size = get_setting('CERTIFICATE_MAX_PAGE_SIZE', 100)
    try:
        page = int(query.get('page', 1))
        per_page = int(query.get('per_page', default_size))
    except (TypeError, ValueError) as e:
        raise InvalidUserInputException(f'Invalid parameter: {e}')

    if page < 1:
        page = 1
    if per_page < 1:
        per_page = default_size
    return page, min(per_page, max_size)
