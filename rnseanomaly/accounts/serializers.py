from django.contrib.auth import get_user_model
from rest_framework import serializers


class CredentialsSerializer(serializers.Serializer):
    """
    Email and password as posted by the login and signup forms.
    """
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_email(self, value):
        return value.strip().lower()


class SignupSerializer(CredentialsSerializer):
    password = serializers.CharField(write_only=True, min_length=8, trim_whitespace=False)

    def validate_email(self, value):
        value = super().validate_email(value)
        if get_user_model().objects.filter(username=value).exists():
            raise serializers.ValidationError("An account with this email already exists.")
        return value


class SessionSerializer(serializers.Serializer):
    session_token = serializers.CharField()
    email = serializers.EmailField()
    user_id = serializers.IntegerField()
