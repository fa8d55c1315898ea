from datetime import timedelta
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase, Client
from django.urls import reverse
from django.utils import timezone

from apps.certificates.models import (
    Certificate,
    CertificateRequest,
    CertificateStatus,
    CertificateType,
    RequestStatus,
)


User = get_user_model()


class CertificateRequestAdminActionTests(TestCase):
    def setUp(self):
        self.client = Client()
        self.superuser = User.objects.create_superuser(
            username='root', email='root@example.com', password='testpass123'
        )
        self.client.force_login(self.superuser)
        self.changelist_url = reverse('admin:certificates_certificaterequest_changelist')

    def _request(self, **kwargs):
        defaults = {
            'user_name': 'alice',
            'user_id': 1001,
            'type': CertificateType.CLIENT,
            'reason': 'need access',
        }
        defaults.update(kwargs)
        return CertificateRequest.objects.create(**defaults)

    def test_approve_selected(self):
        """批量批准只处理待审核的申请"""
        pending = self._request()
        rejected = self._request(user_name='bob', user_id=1002, status=RequestStatus.REJECTED)

        resp = self.client.post(self.changelist_url, {
            'action': 'approve_selected',
            '_selected_action': [pending.pk, rejected.pk],
        })

        self.assertEqual(resp.status_code, 302)
        pending.refresh_from_db()
        rejected.refresh_from_db()
        self.assertEqual(pending.status, RequestStatus.VALID)
        self.assertEqual(pending.approved_by, 'root')
        self.assertEqual(rejected.status, RequestStatus.REJECTED)
        self.assertEqual(Certificate.objects.count(), 1)
        self.assertEqual(Certificate.objects.get().owner_id, 1001)

    def test_reject_selected(self):
        pending = self._request()

        self.client.post(self.changelist_url, {
            'action': 'reject_selected',
            '_selected_action': [pending.pk],
        })

        pending.refresh_from_db()
        self.assertEqual(pending.status, RequestStatus.REJECTED)
        self.assertEqual(pending.rejected_by, 'root')
        self.assertEqual(pending.rejected_reason, 'Rejected by admin')
        self.assertEqual(Certificate.objects.count(), 0)

    def _change_form(self, cert_request, **fields):
        data = {
            'user_name': cert_request.user_name,
            'user_id': cert_request.user_id,
            'type': cert_request.type,
            'reason': cert_request.reason,
        }
        data.update(fields)
        return self.client.post(
            reverse('admin:certificates_certificaterequest_change', args=[cert_request.pk]), data
        )

    def test_change_form_cannot_reopen_rejected_request(self):
        """已拒绝的申请不能在编辑页改回待审核或有效"""
        rejected = self._request(status=RequestStatus.REJECTED, rejected_reason='duplicate')

        self._change_form(rejected, status=RequestStatus.PENDING, rejected_reason='')
        self._change_form(rejected, status=RequestStatus.VALID, user_name='mallory')

        rejected.refresh_from_db()
        self.assertEqual(rejected.status, RequestStatus.REJECTED)
        self.assertEqual(rejected.rejected_reason, 'duplicate')
        self.assertEqual(rejected.user_name, 'alice')
        self.assertIsNone(rejected.approved_by)
        self.assertEqual(Certificate.objects.count(), 0)

    def test_change_form_cannot_approve_pending_request(self):
        """编辑页可以修改待审核申请的内容，但不能修改状态"""
        pending = self._request()

        resp = self._change_form(pending, status=RequestStatus.VALID, reason='updated reason')

        self.assertEqual(resp.status_code, 302)
        pending.refresh_from_db()
        self.assertEqual(pending.status, RequestStatus.PENDING)
        self.assertEqual(pending.reason, 'updated reason')
        self.assertEqual(Certificate.objects.count(), 0)

    def test_revoke_selected(self):
        now = timezone.now()
        cert = Certificate.objects.create(
            name='alice-client-cert', type=CertificateType.CLIENT, owner='alice', owner_id=1001,
            issued_date=now, expiration_date=now + timedelta(days=365),
        )

        self.client.post(reverse('admin:certificates_certificate_changelist'), {
            'action': 'revoke_selected',
            '_selected_action': [cert.pk],
        })

        cert.refresh_from_db()
        self.assertEqual(cert.status, CertificateStatus.REVOKED)
        self.assertFalse(cert.is_active)

    def test_certificate_changelist_shows_active_flag(self):
        now = timezone.now()
        Certificate.objects.create(
            name='alice-client-cert', type=CertificateType.CLIENT, owner='alice', owner_id=1001,
            status=CertificateStatus.EXPIRING, issued_date=now, expiration_date=now + timedelta(days=10),
        )

        resp = self.client.get(reverse('admin:certificates_certificate_changelist'))

        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, 'alice-client-cert')
        self.assertContains(resp, 'column-active')


class RefreshCertificateStatusCommandTests(TestCase):
    def _certificate(self, days, status=CertificateStatus.VALID):
        now = timezone.now()
        return Certificate.objects.create(
            name='cert', type=CertificateType.SERVER, status=status, owner='svc', owner_id=1,
            issued_date=now - timedelta(days=365), expiration_date=now + timedelta(days=days),
        )

    def test_command_updates_statuses(self):
        expired = self._certificate(days=-2)
        expiring = self._certificate(days=5)

        out = StringIO()
        call_command('refresh_certificate_status', stdout=out)

        expired.refresh_from_db()
        expiring.refresh_from_db()
        self.assertEqual(expired.status, CertificateStatus.EXPIRED)
        self.assertEqual(expiring.status, CertificateStatus.EXPIRING)
        self.assertIn('已标记 1 张证书为已过期', out.getvalue())

    def test_command_dry_run(self):
        cert = self._certificate(days=-2)

        out = StringIO()
        call_command('refresh_certificate_status', '--dry-run', stdout=out)

        cert.refresh_from_db()
        self.assertEqual(cert.status, CertificateStatus.VALID)
        self.assertIn('将标记 1 张证书为已过期', out.getvalue())

    def test_command_nothing_to_do(self):
        self._certificate(days=300)

        out = StringIO()
        call_command('refresh_certificate_status', stdout=out)

        self.assertIn('没有需要更新状态的证书', out.getvalue())
