# awards/urls.py
from django.urls import path
from . import views

app_name = 'awards'

urlpatterns = [
    path('', views.award_list, name='award_list'),
    path('create/', views.award_create, name='award_create'),
    path('<int:award_id>/update/', views.award_update, name='award_update'),
    path('<int:award_id>/approve/', views.approve_award, name='approve_award'),
    path('<int:award_id>/reject/', views.reject_award, name='reject_award'),
    path('<int:award_id>/delete/', views.delete_award, name='delete_award'),
]
