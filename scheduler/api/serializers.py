from rest_framework import serializers

from ..data.models import Card, Lesson, Subject
from ..domain.enums import Grade


class ReviewInSerializer(serializers.Serializer):
    card_id = serializers.IntegerField(min_value=1)
    grade = serializers.ChoiceField(choices=[int(g) for g in Grade], required=False)
    correct = serializers.BooleanField(required=False)
    idempotency_key = serializers.CharField(max_length=64)
    session_id = serializers.IntegerField(min_value=1, required=False)
    reviewed_at = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        if ("grade" in attrs) == ("correct" in attrs):
            raise serializers.ValidationError("Provide exactly one of 'grade' or 'correct'.")
        return attrs


class DueQuerySerializer(serializers.Serializer):
    now = serializers.DateTimeField(required=False)  # ISO-8601, defaults to server time
    lesson_id = serializers.IntegerField(min_value=1, required=False)
    limit = serializers.IntegerField(min_value=0, required=False)


class SessionInSerializer(serializers.Serializer):
    lesson_id = serializers.IntegerField(min_value=1)


class CardSerializer(serializers.ModelSerializer):
    class Meta:
        model = Card
        fields = ["id", "front_content", "back_content", "card_type", "display_order", "metadata"]


class SubjectSerializer(serializers.ModelSerializer):
    class Meta:
        model = Subject
        fields = ["id", "name", "abbreviation", "description", "display_order"]


class LessonSerializer(serializers.ModelSerializer):
    subject = SubjectSerializer(read_only=True)
    cards = CardSerializer(many=True, read_only=True)

    class Meta:
        model = Lesson
        fields = ["id", "subject", "title", "description", "difficulty", "is_published", "cards"]
