"""
证书管理模型
"""
from django.db import models
from django.utils.translation import gettext_lazy as _


class CertificateType(models.TextChoices):
    """证书类型"""
    CLIENT = 'client', _('客户端证书')
    SERVER = 'server', _('服务器证书')
    CODE_SIGNING = 'code_signing', _('代码签名证书')
    EMAIL = 'email', _('邮件证书')


class CertificateStatus(models.TextChoices):
    """证书状态"""
    VALID = 'valid', _('有效')
    EXPIRING = 'expiring', _('即将过期')
    EXPIRED = 'expired', _('已过期')
    REVOKED = 'revoked', _('已吊销')


class RequestStatus(models.TextChoices):
    """证书申请状态"""
    PENDING = 'pending', _('待审核')
    VALID = 'valid', _('已批准')
    REJECTED = 'rejected', _('已拒绝')


# 处于这些状态的证书视为仍然可用，租户不能重复申请
ACTIVE_CERTIFICATE_STATUSES = (CertificateStatus.VALID, CertificateStatus.EXPIRING)


class Certificate(models.Model):
    """
    证书模型

    记录已签发的证书及其有效期和状态
    """
    name = models.CharField(
        max_length=255,
        verbose_name=_('证书名称')
    )
    type = models.CharField(
        max_length=32,
        choices=CertificateType.choices,
        verbose_name=_('证书类型')
    )
    status = models.CharField(
        max_length=20,
        choices=CertificateStatus.choices,
        default=CertificateStatus.VALID,
        verbose_name=_('证书状态')
    )

    # 持有者信息
    owner = models.CharField(
        max_length=150,
        blank=True,
        default='',
        verbose_name=_('持有者'),
        help_text=_('持有者用户名')
    )
    owner_id = models.PositiveBigIntegerField(
        default=0,
        verbose_name=_('持有者ID'),
        help_text=_('持有者用户ID')
    )

    content = models.TextField(
        blank=True,
        default='',
        verbose_name=_('证书内容(PEM)')
    )

    # 有效期
    issued_date = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('签发时间')
    )
    expiration_date = models.DateTimeField(
        verbose_name=_('过期时间')
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('创建时间'))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_('更新时间'))

    class Meta:
        verbose_name = _('证书')
        verbose_name_plural = _('证书')
        db_table = 'certificate'
        ordering = ['id']
        indexes = [
            models.Index(fields=['owner_id'], name='certificate_owner_id_idx'),
            models.Index(fields=['status'], name='certificate_status_idx'),
        ]

    def __str__(self):
        return f'{self.name} ({self.get_status_display()})'

    @property
    def is_active(self):
        return self.status in ACTIVE_CERTIFICATE_STATUSES

    def revoke(self):
        """吊销证书"""
        self.status = CertificateStatus.REVOKED
        self.save(update_fields=['status', 'updated_at'])


class CertificateRequest(models.Model):
    """
    证书申请模型

    租户提交申请后处于待审核状态，由管理员批准（生成证书）或拒绝，
    每条申请只能被处理一次
    """
    # 申请人信息
    user_name = models.CharField(
        max_length=150,
        verbose_name=_('申请人')
    )
    user_id = models.PositiveBigIntegerField(
        default=0,
        verbose_name=_('申请人ID')
    )

    type = models.CharField(
        max_length=32,
        choices=CertificateType.choices,
        verbose_name=_('申请证书类型')
    )
    status = models.CharField(
        max_length=20,
        choices=RequestStatus.choices,
        default=RequestStatus.PENDING,
        verbose_name=_('申请状态')
    )
    reason = models.TextField(
        blank=True,
        default='',
        verbose_name=_('申请理由')
    )

    # 审核信息
    approved_by = models.CharField(max_length=150, null=True, blank=True, verbose_name=_('批准人'))
    approved_at = models.DateTimeField(null=True, blank=True, verbose_name=_('批准时间'))
    rejected_by = models.CharField(max_length=150, null=True, blank=True, verbose_name=_('拒绝人'))
    rejected_at = models.DateTimeField(null=True, blank=True, verbose_name=_('拒绝时间'))
    rejected_reason = models.TextField(null=True, blank=True, verbose_name=_('拒绝原因'))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('创建时间'))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_('更新时间'))

    class Meta:
        verbose_name = _('证书申请')
        verbose_name_plural = _('证书申请')
        db_table = 'certificate_request'
        ordering = ['id']
        indexes = [
            models.Index(fields=['user_id', 'status'], name='cert_request_user_status_idx'),
            models.Index(fields=['created_at'], name='cert_request_created_idx'),
        ]

    def __str__(self):
        return f'{self.user_name} - {self.type} [{self.status}]'

    def is_pending(self):
        return self.status == RequestStatus.PENDING
