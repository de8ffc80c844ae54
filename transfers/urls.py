# transfers/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path("", views.transfer_list_view, name="transfer_list"),
    path("admin/", views.admin_transfer_list_view, name="admin_transfer_list"),
    path("admin/<int:transfer_id>/", views.admin_transfer_action_view, name="admin_transfer_action"),
    path("<int:transfer_id>/", views.transfer_detail_view, name="transfer_detail"),
    path("<int:transfer_id>/documents/", views.transfer_documents_view, name="transfer_documents"),
    path(
        "<int:transfer_id>/documents/<int:document_id>/verify/",
        views.document_verify_view,
        name="document_verify",
    ),
]
