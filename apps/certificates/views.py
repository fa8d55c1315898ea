from django.http import JsonResponse, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
import logging

from utils.error_handlers import CertificateServiceError, error_response
from utils.helpers import get_client_ip, get_page_params, parse_json_body
from . import services
from .decorators import api_login_required, api_staff_required
from .models import Certificate, CertificateRequest
from .serializers import (
    CertificateSerializer,
    CertificateRequestSerializer,
    CertificateCreateSerializer,
    CertificateUpdateSerializer,
    CertificateRequestCreateSerializer,
    TenantCertificateRequestSerializer,
    RejectRequestSerializer,
    format_errors,
)

logger = logging.getLogger(__name__)

# 下载接口目前返回固定的示例证书，与已存储的证书无关
PLACEHOLDER_CERTIFICATE_PEM = (
    "-----BEGIN CERTIFICATE-----\n"
    "MIIBIjANBgkqhkiG9w0BAQEFAAOCAQ8AMIIBCgKCAQEA...\n"
    "-----END CERTIFICATE-----"
)


def _failure(error, action):
    """把异常转换为错误响应，业务错误按类型决定状态码"""
    if isinstance(error, CertificateServiceError) and error.status_code < 500:
        logger.info(f"Rejected {action}: {error}")
    else:
        logger.error(f"Error {action}: {str(error)}", exc_info=True)
    return error_response(error)


def _bind(serializer_class, request):
    """解析并校验JSON请求体，失败时返回 (None, 400响应)"""
    serializer = serializer_class(data=parse_json_body(request))
    if not serializer.is_valid():
        return None, JsonResponse({
            'success': False,
            'error': format_errors(serializer.errors)
        }, status=400)
    return serializer.validated_data, None


def _page_response(items, total, serializer_class):
    return JsonResponse({
        'success': True,
        'data': {
            'content': serializer_class(items, many=True).data,
            'total': total
        }
    })


# --- 管理员接口 ---

@csrf_exempt
@api_staff_required
@require_http_methods(["GET"])
def certificate_list(request):
    """获取证书列表（分页）"""
    try:
        page, per_page = get_page_params(request.GET)
        certs, total = services.get_certificates(page, per_page)
        return _page_response(certs, total, CertificateSerializer)
    except Exception as e:
        return _failure(e, "listing certificates")


@csrf_exempt
@api_staff_required
@require_http_methods(["POST"])
def create_certificate(request):
    """创建证书"""
    try:
        data, invalid = _bind(CertificateCreateSerializer, request)
        if invalid:
            return invalid

        cert = Certificate(
            name=data['name'],
            type=data['type'],
            owner=data['owner'],
            owner_id=data['owner_id'],
            content=data['content'],
            issued_date=data['issued_date'],
            expiration_date=data['expiration_date'],
        )
        services.create_certificate(cert)
        return JsonResponse({
            'success': True,
            'data': CertificateSerializer(cert).data
        })
    except Exception as e:
        return _failure(e, "creating certificate")


@csrf_exempt
@api_staff_required
@require_http_methods(["POST", "PUT", "PATCH"])
def update_certificate(request, cert_id):
    """更新证书名称和过期时间"""
    try:
        data, invalid = _bind(CertificateUpdateSerializer, request)
        if invalid:
            return invalid

        cert = services.update_certificate_details(cert_id, data['name'], data['expiration_date'])
        return JsonResponse({
            'success': True,
            'data': CertificateSerializer(cert).data
        })
    except Exception as e:
        return _failure(e, f"updating certificate {cert_id}")


@csrf_exempt
@api_staff_required
@require_http_methods(["POST", "DELETE"])
def delete_certificate(request, cert_id):
    """删除证书"""
    try:
        services.delete_certificate(cert_id)
        return JsonResponse({
            'success': True,
            'message': 'Certificate deleted successfully'
        })
    except Exception as e:
        return _failure(e, f"deleting certificate {cert_id}")


@csrf_exempt
@api_staff_required
@require_http_methods(["POST"])
def revoke_certificate(request, cert_id):
    """吊销证书"""
    try:
        services.revoke_certificate(cert_id)
        logger.info(f"Certificate {cert_id} revoked by {request.user.get_username()} from {get_client_ip(request)}")
        return JsonResponse({
            'success': True,
            'message': 'Certificate revoked successfully'
        })
    except Exception as e:
        return _failure(e, f"revoking certificate {cert_id}")


@csrf_exempt
@api_staff_required
@require_http_methods(["GET"])
def certificate_request_list(request):
    """获取证书申请列表（分页）"""
    try:
        page, per_page = get_page_params(request.GET)
        requests, total = services.get_certificate_requests(page, per_page)
        return _page_response(requests, total, CertificateRequestSerializer)
    except Exception as e:
        return _failure(e, "listing certificate requests")


@csrf_exempt
@api_staff_required
@require_http_methods(["POST"])
def create_certificate_request(request):
    """管理员代为创建证书申请"""
    try:
        data, invalid = _bind(CertificateRequestCreateSerializer, request)
        if invalid:
            return invalid

        cert_request = services.create_certificate_request(CertificateRequest(
            user_name=data['user_name'],
            user_id=data['user_id'],
            type=data['type'],
            reason=data['reason'],
        ))
        return JsonResponse({
            'success': True,
            'data': CertificateRequestSerializer(cert_request).data
        })
    except Exception as e:
        return _failure(e, "creating certificate request")


@csrf_exempt
@api_staff_required
@require_http_methods(["POST"])
def approve_certificate_request(request, request_id):
    """批准证书申请并签发证书"""
    try:
        services.approve_and_create_certificate(request_id, request.user)
        logger.info(f"Request {request_id} approved from {get_client_ip(request)}")
        return JsonResponse({
            'success': True,
            'message': 'Certificate request approved successfully'
        })
    except Exception as e:
        return _failure(e, f"approving certificate request {request_id}")


@csrf_exempt
@api_staff_required
@require_http_methods(["POST"])
def reject_certificate_request(request, request_id):
    """拒绝证书申请"""
    try:
        data, invalid = _bind(RejectRequestSerializer, request)
        if invalid:
            return invalid

        services.reject_certificate_request(request_id, request.user, data['reason'])
        return JsonResponse({
            'success': True,
            'message': 'Certificate request rejected successfully'
        })
    except Exception as e:
        return _failure(e, f"rejecting certificate request {request_id}")


@api_login_required
@require_http_methods(["GET"])
def download_certificate(request):
    """下载证书"""
    response = HttpResponse(PLACEHOLDER_CERTIFICATE_PEM, content_type='application/x-pem-file')
    response['Content-Disposition'] = 'attachment; filename="certificate.pem"'
    return response


# --- 租户接口 ---

@csrf_exempt
@api_login_required
@require_http_methods(["POST"])
def create_tenant_certificate_request(request):
    """租户申请证书"""
    try:
        data, invalid = _bind(TenantCertificateRequestSerializer, request)
        if invalid:
            return invalid

        cert_request = services.create_tenant_certificate_request(
            request.user, data['type'], data['reason']
        )
        return JsonResponse({
            'success': True,
            'data': CertificateRequestSerializer(cert_request).data
        })
    except Exception as e:
        return _failure(e, "creating tenant certificate request")


@api_login_required
@require_http_methods(["GET"])
def get_tenant_certificate(request):
    """获取当前租户的证书，没有证书时 data 为 null"""
    try:
        cert = services.get_certificate_for_tenant(request.user.pk)
        return JsonResponse({
            'success': True,
            'data': CertificateSerializer(cert).data if cert else None
        })
    except Exception as e:
        return _failure(e, "getting tenant certificate")


@api_login_required
@require_http_methods(["GET"])
def get_tenant_certificate_requests(request):
    """获取当前租户的申请记录"""
    try:
        requests = services.get_tenant_certificate_requests(request.user.pk)
        return JsonResponse({
            'success': True,
            'data': CertificateRequestSerializer(requests, many=True).data
        })
    except Exception as e:
        return _failure(e, "getting tenant certificate requests")
