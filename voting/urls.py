# voting/urls.py
from django.urls import path
from . import views

app_name = 'voting'

urlpatterns = [
    path('awards/', views.voting_awards, name='voting_awards'),
    path('entries/', views.voting_entries, name='voting_entries'),
    path('nominee/', views.nominee_detail, name='nominee_detail'),
    path('cast/', views.cast_vote, name='cast_vote'),
    path('verify/<str:token>/', views.verify_vote, name='verify_vote'),
]
