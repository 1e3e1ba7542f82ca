"""
API Serializers for the support app.
"""

from rest_framework import serializers

from accounts.models import User

from .models import GROUP_CHOICES, Message, Resource, ResourceCategory, SupportTicket


# =============================================================================
# RESOURCE CENTRE
# =============================================================================

class ResourceCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = ResourceCategory
        fields = ['id', 'name', 'created_at']
        read_only_fields = ['id', 'created_at']


class FaqItemSerializer(serializers.Serializer):
    question = serializers.CharField()
    answer = serializers.CharField()


class ResourceSerializer(serializers.ModelSerializer):
    """A resource must carry the content matching its content type."""

    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    faqs = serializers.ListField(child=FaqItemSerializer(), required=False)

    class Meta:
        model = Resource
        fields = [
            'id', 'title', 'category', 'category_name', 'content_type', 'feature_image',
            'article_content', 'video_url', 'faqs', 'created_at',
        ]
        read_only_fields = ['id', 'created_at']

    def validate(self, data):
        def current(field, default=None):
            if field in data:
                return data[field]
            return getattr(self.instance, field, default) if self.instance else default

        content_type = current('content_type', Resource.TYPE_ARTICLE)
        if content_type == Resource.TYPE_ARTICLE and not (current('article_content') or '').strip():
            raise serializers.ValidationError({'article_content': "Article content is required."})
        if content_type == Resource.TYPE_VIDEO and not current('video_url'):
            raise serializers.ValidationError({'video_url': "A video URL is required."})
        if content_type == Resource.TYPE_FAQ and not current('faqs'):
            raise serializers.ValidationError({'faqs': "Add at least one question."})
        return data


# =============================================================================
# SUPPORT TICKETS
# =============================================================================

class SupportTicketSerializer(serializers.ModelSerializer):
    user_code = serializers.CharField(source='user.user_code', read_only=True)
    user_name = serializers.CharField(source='user.display_name', read_only=True)

    class Meta:
        model = SupportTicket
        fields = [
            'id', 'user_code', 'user_name', 'category', 'item_id', 'item_title', 'subject',
            'description', 'status', 'resolution_details', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'status', 'resolution_details', 'created_at', 'updated_at']


class TicketResolutionSerializer(serializers.ModelSerializer):
    class Meta:
        model = SupportTicket
        fields = ['status', 'resolution_details']


# =============================================================================
# MESSAGES
# =============================================================================

class MessageSerializer(serializers.ModelSerializer):
    sender_code = serializers.CharField(source='sender.user_code', read_only=True, default=None)
    sender_name = serializers.CharField(source='sender.display_name', read_only=True, default=None)
    recipient_name = serializers.CharField(read_only=True)
    is_read = serializers.SerializerMethodField()

    class Meta:
        model = Message
        fields = [
            'id', 'sender_code', 'sender_name', 'recipient_group', 'recipient_name',
            'subject', 'body', 'is_announcement', 'is_read', 'created_at',
        ]
        read_only_fields = fields

    def get_is_read(self, obj):
        request = self.context.get('request')
        if request is None or not request.user.is_authenticated:
            return False
        return obj.is_read_by(request.user)


class SendMessageSerializer(serializers.Serializer):
    recipient_id = serializers.SlugRelatedField(
        slug_field='user_code', queryset=User.objects.all(), required=False, allow_null=True
    )
    recipient_group = serializers.ChoiceField(choices=GROUP_CHOICES, required=False, allow_blank=True, default='')
    subject = serializers.CharField(max_length=200)
    body = serializers.CharField()

    def validate(self, data):
        if bool(data.get('recipient_id')) == bool(data.get('recipient_group')):
            raise serializers.ValidationError({'recipient_id': "Choose either a recipient or a recipient group."})
        return data
