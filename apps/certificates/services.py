"""
业务逻辑服务层
将证书和证书申请的业务规则从视图和Admin中抽离出来，提供统一的服务接口
"""
import logging
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.paginator import Paginator, EmptyPage
from django.db import transaction
from django.utils import timezone

from utils.error_handlers import (
    CertificateAlreadyExists,
    CertificateNotFound,
    CertificateRequestNotFound,
    CertificateRequestPending,
    RequestNotPending,
)
from utils.helpers import get_setting
from .models import (
    ACTIVE_CERTIFICATE_STATUSES,
    Certificate,
    CertificateRequest,
    CertificateStatus,
    RequestStatus,
)

logger = logging.getLogger(__name__)


def _paginate(queryset, page, per_page):
    """按页取数据，超出范围的页返回空列表"""
    paginator = Paginator(queryset, per_page)
    try:
        items = list(paginator.page(page).object_list)
    except EmptyPage:
        items = []
    return items, paginator.count


# --- Certificate ---

def get_certificate_by_id(cert_id):
    try:
        return Certificate.objects.get(pk=cert_id)
    except Certificate.DoesNotExist:
        raise CertificateNotFound(cert_id)


def get_certificate_by_owner(owner_id):
    """获取持有者最新的一张证书"""
    cert = Certificate.objects.filter(owner_id=owner_id).order_by('-id').first()
    if cert is None:
        raise CertificateNotFound(f"owner_id={owner_id}")
    return cert


def get_certificates(page, per_page):
    """
    分页获取证书列表

    Returns:
        tuple: (证书列表, 总数)
    """
    return _paginate(Certificate.objects.order_by('id'), page, per_page)


def create_certificate(cert):
    cert.save()
    logger.info(f"Created certificate {cert.id} ({cert.name}) for owner {cert.owner_id}")
    return cert


def update_certificate(cert):
    cert.save()
    return cert


def delete_certificate(cert_id):
    deleted, _ = Certificate.objects.filter(pk=cert_id).delete()
    if deleted:
        logger.info(f"Deleted certificate {cert_id}")
    else:
        logger.warning(f"Delete requested for missing certificate {cert_id}")


def revoke_certificate(cert_id):
    cert = get_certificate_by_id(cert_id)
    cert.revoke()
    logger.info(f"Revoked certificate {cert_id}")
    return cert


def update_certificate_details(cert_id, name, expiration_date):
    """
    更新证书名称和过期时间

    不校验过期时间是否晚于当前时间
    """
    cert = get_certificate_by_id(cert_id)
    cert.name = name
    cert.expiration_date = expiration_date
    cert.save()
    logger.info(f"Updated certificate {cert_id}: name={name}, expiration_date={expiration_date}")
    return cert


def get_certificate_for_tenant(owner_id):
    """
    租户查询自己的证书

    Returns:
        Certificate 或 None（租户还没有证书）
    """
    try:
        return get_certificate_by_owner(owner_id)
    except CertificateNotFound:
        return None


# --- CertificateRequest ---

def get_certificate_requests(page, per_page):
    return _paginate(CertificateRequest.objects.order_by('id'), page, per_page)


def get_certificate_request_by_id(request_id):
    try:
        return CertificateRequest.objects.get(pk=request_id)
    except CertificateRequest.DoesNotExist:
        raise CertificateRequestNotFound(request_id)


def get_tenant_certificate_requests(user_id):
    """获取租户的全部申请记录，最新的在前"""
    return list(
        CertificateRequest.objects.filter(user_id=user_id).order_by('-created_at', '-id')
    )


def get_pending_certificate_request_by_user_id(user_id):
    return CertificateRequest.objects.filter(
        user_id=user_id, status=RequestStatus.PENDING
    ).first()


def create_certificate_request(cert_request):
    """管理员直接创建申请，不做重复检查"""
    cert_request.status = RequestStatus.PENDING
    cert_request.save()
    logger.info(f"Created certificate request {cert_request.id} for user {cert_request.user_name}")
    return cert_request


def create_tenant_certificate_request(user, cert_type, reason):
    """
    租户申请证书

    1. 已持有有效或即将过期的证书时不允许申请
    2. 已有待审核的申请时不允许再次申请
    3. 创建待审核的申请

    Args:
        user: 当前登录用户
        cert_type: 申请的证书类型
        reason: 申请理由

    Raises:
        CertificateAlreadyExists: 已持有有效证书
        CertificateRequestPending: 已有待审核申请
    """
    User = get_user_model()
    with transaction.atomic():
        # 锁定用户行，同一用户的申请串行执行检查和创建
        User.objects.select_for_update().filter(pk=user.pk).first()

        if Certificate.objects.filter(
            owner_id=user.pk, status__in=ACTIVE_CERTIFICATE_STATUSES
        ).exists():
            raise CertificateAlreadyExists()

        if get_pending_certificate_request_by_user_id(user.pk) is not None:
            raise CertificateRequestPending()

        cert_request = CertificateRequest.objects.create(
            user_name=user.get_username(),
            user_id=user.pk,
            type=cert_type,
            status=RequestStatus.PENDING,
            reason=reason,
        )

    logger.info(f"User {user.get_username()} submitted certificate request {cert_request.id} ({cert_type})")
    return cert_request


def _get_request_for_update(request_id):
    try:
        return CertificateRequest.objects.select_for_update().get(pk=request_id)
    except CertificateRequest.DoesNotExist:
        raise CertificateRequestNotFound(request_id)


def approve_and_create_certificate(request_id, admin_user):
    """
    批准申请并签发证书

    证书的创建和申请状态的更新在同一个事务中完成。
    证书内容暂为空，有效期由 CERTIFICATE_VALIDITY_DAYS 决定

    Args:
        request_id: 申请ID
        admin_user: 审批的管理员

    Returns:
        Certificate: 新签发的证书

    Raises:
        CertificateRequestNotFound: 申请不存在
        RequestNotPending: 申请已被处理
    """
    validity_days = get_setting('CERTIFICATE_VALIDITY_DAYS', 365)

    with transaction.atomic():
        cert_request = _get_request_for_update(request_id)
        if not cert_request.is_pending():
            raise RequestNotPending(cert_request.status)

        now = timezone.now()
        cert = Certificate.objects.create(
            name=f"{cert_request.user_name}-{cert_request.type}-cert",
            type=cert_request.type,
            status=CertificateStatus.VALID,
            owner=cert_request.user_name,
            owner_id=cert_request.user_id,
            content='',
            issued_date=now,
            expiration_date=now + timedelta(days=validity_days),
        )

        cert_request.status = RequestStatus.VALID
        cert_request.approved_by = admin_user.get_username()
        cert_request.approved_at = now
        cert_request.save()

    logger.info(
        f"Request {request_id} approved by {admin_user.get_username()}, "
        f"issued certificate {cert.id} ({cert.name})"
    )
    return cert


def reject_certificate_request(request_id, admin_user, reason):
    """
    拒绝证书申请

    Raises:
        CertificateRequestNotFound: 申请不存在
        RequestNotPending: 申请已被处理
    """
    with transaction.atomic():
        cert_request = _get_request_for_update(request_id)
        if not cert_request.is_pending():
            raise RequestNotPending(cert_request.status)

        cert_request.status = RequestStatus.REJECTED
        cert_request.rejected_by = admin_user.get_username()
        cert_request.rejected_at = timezone.now()
        cert_request.rejected_reason = reason
        cert_request.save()

    logger.info(f"Request {request_id} rejected by {admin_user.get_username()}: {reason}")
    return cert_request


# --- 状态刷新 ---

def refresh_certificate_statuses(now=None, dry_run=False):
    """
    根据过期时间刷新证书状态

    - 已过期且未吊销的证书标记为 expired
    - 在 CERTIFICATE_EXPIRING_DAYS 天内过期的有效证书标记为 expiring
    - 过期时间被延后、不再临近过期的 expiring 证书恢复为 valid

    Args:
        now: 参考时间，默认当前时间
        dry_run: 只统计不更新

    Returns:
        dict: 各类变更的证书数量
    """
    now = now or timezone.now()
    threshold = now + timedelta(days=get_setting('CERTIFICATE_EXPIRING_DAYS', 30))

    expired_qs = Certificate.objects.filter(expiration_date__lte=now).exclude(
        status__in=[CertificateStatus.REVOKED, CertificateStatus.EXPIRED]
    )
    expiring_qs = Certificate.objects.filter(
        status=CertificateStatus.VALID,
        expiration_date__gt=now,
        expiration_date__lte=threshold,
    )
    renewed_qs = Certificate.objects.filter(
        status=CertificateStatus.EXPIRING,
        expiration_date__gt=threshold,
    )

    if dry_run:
        return {
            'expired': expired_qs.count(),
            'expiring': expiring_qs.count(),
            'valid': renewed_qs.count(),
        }

    with transaction.atomic():
        result = {
            'expired': expired_qs.update(status=CertificateStatus.EXPIRED, updated_at=now),
            'expiring': expiring_qs.update(status=CertificateStatus.EXPIRING, updated_at=now),
            'valid': renewed_qs.update(status=CertificateStatus.VALID, updated_at=now),
        }

    logger.info(f"Refreshed certificate statuses: {result}")
    return result
