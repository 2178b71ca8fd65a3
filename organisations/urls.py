# organisations/urls.py
from django.urls import path
from . import views

app_name = 'organisations'

urlpatterns = [
    path('', views.organisation_list, name='organisation_list'),
    path('create/', views.organisation_create, name='organisation_create'),
    path('<int:organisation_id>/update/', views.organisation_update, name='organisation_update'),
    path('<int:organisation_id>/delete/', views.organisation_delete, name='organisation_delete'),

    # Award assignments
    path('assignments/award/<int:award_id>/', views.award_assignments, name='award_assignments'),
    path('assignments/award/<int:award_id>/assign/', views.assign_organisation, name='assign_organisation'),
    path('assignments/award/<int:award_id>/bulk-assign/', views.bulk_assign, name='bulk_assign'),
    path('assignments/<int:assignment_id>/remove/', views.remove_assignment, name='remove_assignment'),
    path('assignments/<int:assignment_id>/status/', views.change_assignment_status, name='change_assignment_status'),
    path('assignments/<int:assignment_id>/score/', views.set_judge_score, name='set_judge_score'),

    # Winners
    path('winners/', views.winner_list, name='winner_list'),
]
