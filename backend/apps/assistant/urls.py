"""
Assistant URL configuration
"""
from django.urls import path

from . import views

urlpatterns = [
    path('', views.assistant_chat_stream, name='assistant-chat-stream'),
]
