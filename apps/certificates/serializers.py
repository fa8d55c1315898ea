"""
证书接口的序列化器

负责请求体校验和模型到JSON的转换
"""
from rest_framework import serializers

from .models import Certificate, CertificateRequest, CertificateType


class CertificateSerializer(serializers.ModelSerializer):
    """证书输出"""

    class Meta:
        model = Certificate
        fields = [
            'id', 'name', 'type', 'status', 'owner', 'owner_id', 'content',
            'issued_date', 'expiration_date', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class CertificateRequestSerializer(serializers.ModelSerializer):
    """证书申请输出"""

    class Meta:
        model = CertificateRequest
        fields = [
            'id', 'user_name', 'user_id', 'type', 'status', 'reason',
            'approved_by', 'approved_at', 'rejected_by', 'rejected_at',
            'rejected_reason', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class CertificateCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    type = serializers.ChoiceField(choices=CertificateType.choices)
    owner = serializers.CharField(max_length=150, allow_blank=True, default='')
    owner_id = serializers.IntegerField(min_value=0, default=0)
    content = serializers.CharField(trim_whitespace=False)
    issued_date = serializers.DateTimeField(allow_null=True, default=None)
    expiration_date = serializers.DateTimeField()


class CertificateUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    expiration_date = serializers.DateTimeField()


class CertificateRequestCreateSerializer(serializers.Serializer):
    user_name = serializers.CharField(max_length=150)
    user_id = serializers.IntegerField(min_value=0, default=0)
    type = serializers.ChoiceField(choices=CertificateType.choices)
    reason = serializers.CharField()


class TenantCertificateRequestSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=CertificateType.choices)
    reason = serializers.CharField()


class RejectRequestSerializer(serializers.Serializer):
    reason = serializers.CharField()


def format_errors(errors):
    """把序列化器的错误字典压成一行文本"""
    parts = []
    for field, messages in errors.items():
        if isinstance(messages, (list, tuple)):
            text = ' '.join(str(m) for m in messages)
        else:
            text = str(messages)
        parts.append(f"{field}: {text}")
    return '; '.join(parts)
