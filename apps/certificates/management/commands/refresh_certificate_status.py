from django.core.management.base import BaseCommand

from apps.certificates.services import refresh_certificate_statuses


class Command(BaseCommand):
    help = '根据过期时间刷新证书状态（即将过期/已过期）'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='仅统计需要变更状态的证书，不实际更新',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        result = refresh_certificate_statuses(dry_run=dry_run)

        if not any(result.values()):
            self.stdout.write(self.style.SUCCESS('没有需要更新状态的证书'))
            return

        verb = '将' if dry_run else '已'
        self.stdout.write(
            self.style.SUCCESS(
                f"{verb}标记 {result['expired']} 张证书为已过期，"
                f"{result['expiring']} 张证书为即将过期，"
                f"{result['valid']} 张证书恢复为有效"
            )
        )
