from django.urls import path
from . import views

app_name = 'certificates'

urlpatterns = [
    # 证书管理API（管理员）
    path('admin/certificates/', views.certificate_list, name='certificate_list'),
    path('admin/certificates/create/', views.create_certificate, name='create_certificate'),
    path('admin/certificates/<int:cert_id>/update/', views.update_certificate, name='update_certificate'),
    path('admin/certificates/<int:cert_id>/delete/', views.delete_certificate, name='delete_certificate'),
    path('admin/certificates/<int:cert_id>/revoke/', views.revoke_certificate, name='revoke_certificate'),

    # 证书申请API（管理员）
    path('admin/requests/', views.certificate_request_list, name='certificate_request_list'),
    path('admin/requests/create/', views.create_certificate_request, name='create_certificate_request'),
    path('admin/requests/<int:request_id>/approve/', views.approve_certificate_request, name='approve_certificate_request'),
    path('admin/requests/<int:request_id>/reject/', views.reject_certificate_request, name='reject_certificate_request'),

    path('download/', views.download_certificate, name='download_certificate'),

    # 租户API
    path('tenant/request/', views.create_tenant_certificate_request, name='tenant_create_request'),
    path('tenant/certificate/', views.get_tenant_certificate, name='tenant_certificate'),
    path('tenant/requests/', views.get_tenant_certificate_requests, name='tenant_requests'),
]
