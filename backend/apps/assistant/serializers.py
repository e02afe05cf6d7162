"""
Assistant request serializers
"""
from rest_framework import serializers

from apps.common.llm_providers import ChatMessage


class ChatTurnSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=['user', 'assistant'])
    content = serializers.CharField(trim_whitespace=False)


class ChatContextSerializer(serializers.Serializer):
    view = serializers.CharField(required=False, allow_blank=True, max_length=200)


class ChatRequestSerializer(serializers.Serializer):
    """
    Body of POST /api/chat/

    {
        "messages": [{"role": "user", "content": "Who is getting married next?"}],
        "context": {"view": "couples"}
    }
    """
    messages = ChatTurnSerializer(many=True, allow_empty=False)
    context = ChatContextSerializer(required=False)

    def to_chat_messages(self):
        return [
            ChatMessage(role=turn['role'], content=turn['content'])
            for turn in self.validated_data['messages']
        ]

    @property
    def current_view(self):
        return (self.validated_data.get('context') or {}).get('view') or None
