from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Certificate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, verbose_name='证书名称')),
                ('type', models.CharField(choices=[('client', '客户端证书'), ('server', '服务器证书'), ('code_signing', '代码签名证书'), ('email', '邮件证书')], max_length=32, verbose_name='证书类型')),
                ('status', models.CharField(choices=[('valid', '有效'), ('expiring', '即将过期'), ('expired', '已过期'), ('revoked', '已吊销')], default='valid', max_length=20, verbose_name='证书状态')),
                ('owner', models.CharField(blank=True, default='', help_text='持有者用户名', max_length=150, verbose_name='持有者')),
                ('owner_id', models.PositiveBigIntegerField(default=0, help_text='持有者用户ID', verbose_name='持有者ID')),
                ('content', models.TextField(blank=True, default='', verbose_name='证书内容(PEM)')),
                ('issued_date', models.DateTimeField(blank=True, null=True, verbose_name='签发时间')),
                ('expiration_date', models.DateTimeField(verbose_name='过期时间')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='创建时间')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='更新时间')),
            ],
            options={
                'verbose_name': '证书',
                'verbose_name_plural': '证书',
                'db_table': 'certificate',
                'ordering': ['id'],
                'indexes': [
                    models.Index(fields=['owner_id'], name='certificate_owner_id_idx'),
                    models.Index(fields=['status'], name='certificate_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CertificateRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('user_name', models.CharField(max_length=150, verbose_name='申请人')),
                ('user_id', models.PositiveBigIntegerField(default=0, verbose_name='申请人ID')),
                ('type', models.CharField(choices=[('client', '客户端证书'), ('server', '服务器证书'), ('code_signing', '代码签名证书'), ('email', '邮件证书')], max_length=32, verbose_name='申请证书类型')),
                ('status', models.CharField(choices=[('pending', '待审核'), ('valid', '已批准'), ('rejected', '已拒绝')], default='pending', max_length=20, verbose_name='申请状态')),
                ('reason', models.TextField(blank=True, default='', verbose_name='申请理由')),
                ('approved_by', models.CharField(blank=True, max_length=150, null=True, verbose_name='批准人')),
                ('approved_at', models.DateTimeField(blank=True, null=True, verbose_name='批准时间')),
                ('rejected_by', models.CharField(blank=True, max_length=150, null=True, verbose_name='拒绝人')),
                ('rejected_at', models.DateTimeField(blank=True, null=True, verbose_name='拒绝时间')),
                ('rejected_reason', models.TextField(blank=True, null=True, verbose_name='拒绝原因')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='创建时间')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='更新时间')),
            ],
            options={
                'verbose_name': '证书申请',
                'verbose_name_plural': '证书申请',
                'db_table': 'certificate_request',
                'ordering': ['id'],
                'indexes': [
                    models.Index(fields=['user_id', 'status'], name='cert_request_user_status_idx'),
                    models.Index(fields=['created_at'], name='cert_request_created_idx'),
                ],
            },
        ),
    ]
