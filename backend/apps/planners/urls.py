"""
Planner URL configuration
"""
from django.urls import path

from . import views

urlpatterns = [
    path('auth/', views.planner_auth_view, name='planner-auth'),
    path('couples/', views.couples_list_view, name='planner-couples'),
    path('couples/parse/', views.couple_parse_view, name='planner-couple-parse'),
    path('couples/<uuid:couple_id>/vendors/', views.couple_vendors_view, name='planner-couple-vendors'),
]
