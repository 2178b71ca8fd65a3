# entries/urls.py
from django.urls import path
from . import views
from .webhook_views import StripeWebhookView

app_name = 'entries'

urlpatterns = [
    # Public submission wizard
    path('submit/options/', views.submission_options, name='submission_options'),
    path('submit/details/', views.submission_details, name='submission_details'),
    path('submit/back/', views.submission_back, name='submission_back'),
    path('submit/confirm/', views.submission_confirm, name='submission_confirm'),
    path('submit/state/', views.submission_state, name='submission_state'),

    # Payments
    path('payments/webhook/', StripeWebhookView.as_view(), name='stripe_webhook'),
    path('payments/status/<int:entry_id>/', views.payment_status, name='payment_status'),
    path('payments/verify/<str:session_id>/', views.verify_payment, name='verify_payment'),

    # Admin
    path('', views.entry_list, name='entry_list'),
    path('<int:entry_id>/', views.entry_detail, name='entry_detail'),
    path('<int:entry_id>/status/', views.change_entry_status, name='change_entry_status'),
    path('<int:entry_id>/voting/', views.update_voting_flags, name='update_voting_flags'),
    path('<int:entry_id>/delete/', views.delete_entry, name='delete_entry'),
    path('invoices/', views.invoice_list, name='invoice_list'),
]
