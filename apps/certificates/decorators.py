from functools import wraps
import logging

from django.http import JsonResponse

logger = logging.getLogger(__name__)


def api_login_required(view_func):
    """要求已登录，未登录时返回401 JSON而不是跳转登录页"""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({
                'success': False,
                'error': 'Authentication required'
            }, status=401)
        return view_func(request, *args, **kwargs)
    return wrapper


def api_staff_required(view_func):
    """要求管理员（is_staff）身份"""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({
                'success': False,
                'error': 'Authentication required'
            }, status=401)
        if not request.user.is_staff:
            logger.warning(f"Non-staff user {request.user.get_username()} denied access to {request.path}")
            return JsonResponse({
                'success': False,
                'error': 'Permission denied'
            }, status=403)
        return view_func(request, *args, **kwargs)
    return wrapper
