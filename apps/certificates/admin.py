"""
证书管理后台
"""
from django.contrib import admin, messages

from utils.error_handlers import CertificateServiceError
from . import services
from .models import Certificate, CertificateRequest, CertificateStatus


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    """
    证书管理后台
    """
    list_display = ['name', 'type', 'status', 'active', 'owner', 'issued_date', 'expiration_date']
    list_filter = ['type', 'status', 'expiration_date']
    search_fields = ['name', 'owner']
    readonly_fields = ['created_at', 'updated_at']
    actions = ['revoke_selected']

    @admin.display(boolean=True, description='有效')
    def active(self, obj):
        return obj.is_active

    @admin.action(description='吊销选中的证书')
    def revoke_selected(self, request, queryset):
        revoked_count = 0
        for cert in queryset.exclude(status=CertificateStatus.REVOKED):
            services.revoke_certificate(cert.pk)
            revoked_count += 1

        if revoked_count > 0:
            self.message_user(request, f'成功吊销了 {revoked_count} 张证书。')
        else:
            self.message_user(request, '选中的证书均已吊销。', level=messages.WARNING)


@admin.register(CertificateRequest)
class CertificateRequestAdmin(admin.ModelAdmin):
    """
    证书申请管理后台
    """
    list_display = ['user_name', 'type', 'status', 'created_at', 'approved_by', 'rejected_by']
    list_filter = ['status', 'type', 'created_at']
    search_fields = ['user_name', 'reason']
    # 状态只能通过批准/拒绝操作变更
    readonly_fields = [
        'status', 'approved_by', 'approved_at', 'rejected_by', 'rejected_at',
        'rejected_reason', 'created_at', 'updated_at',
    ]
    actions = ['approve_selected', 'reject_selected']

    fieldsets = (
        ('申请人信息', {
            'fields': ('user_name', 'user_id')
        }),
        ('申请信息', {
            'fields': ('type', 'status', 'reason')
        }),
        ('审核信息', {
            'fields': ('approved_by', 'approved_at', 'rejected_by', 'rejected_at', 'rejected_reason')
        }),
        ('时间信息', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_readonly_fields(self, request, obj=None):
        readonly = list(super().get_readonly_fields(request, obj))
        if obj is not None and not obj.is_pending():
            readonly += ['user_name', 'user_id', 'type', 'reason']
        return readonly

    def _process_selected(self, request, queryset, handler):
        """逐条处理待审核的申请，已处理的申请跳过"""
        done_count = 0
        for cert_request in queryset:
            try:
                handler(cert_request)
                done_count += 1
            except CertificateServiceError as e:
                self.message_user(request, f'{cert_request}: {e}', level=messages.WARNING)
        return done_count

    @admin.action(description='批准选中的证书申请')
    def approve_selected(self, request, queryset):
        approved_count = self._process_selected(
            request, queryset,
            lambda r: services.approve_and_create_certificate(r.pk, request.user)
        )
        if approved_count > 0:
            self.message_user(request, f'成功批准了 {approved_count} 个证书申请。')
        else:
            self.message_user(
                request,
                '没有符合条件的证书申请需要批准（只对待审核状态的申请进行批准）。',
                level=messages.WARNING
            )

    @admin.action(description='拒绝选中的证书申请')
    def reject_selected(self, request, queryset):
        rejected_count = self._process_selected(
            request, queryset,
            lambda r: services.reject_certificate_request(r.pk, request.user, 'Rejected by admin')
        )
        if rejected_count > 0:
            self.message_user(request, f'成功拒绝了 {rejected_count} 个证书申请。')
        else:
            self.message_user(
                request,
                '没有符合条件的证书申请需要拒绝（只对待审核状态的申请进行拒绝）。',
                level=messages.WARNING
            )
