from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from .models import Group, GroupMembership, GroupRole


class GroupSerializer(serializers.ModelSerializer):
    """Main serializer for groups."""

    creator = UserMinimalSerializer(read_only=True)
    member_count = serializers.SerializerMethodField()
    user_role = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'code',
            'creator',
            'member_count',
            'user_role',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_member_count(self, obj):
        """Get number of members in the group."""
        return obj.memberships.count()

    def get_user_role(self, obj):
        """Get current user's role in the group."""
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.get_user_role(request.user)
        return None


class GroupCreateSerializer(serializers.Serializer):
    """Serializer for creating groups; the code is generated when omitted."""

    name = serializers.CharField(max_length=200)
    code = serializers.CharField(max_length=6, min_length=6, required=False)


class GroupUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)


class GroupMemberSerializer(serializers.ModelSerializer):
    """Detailed member information."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = GroupMembership
        fields = ['id', 'user', 'role', 'joined_at']
        read_only_fields = fields


class JoinGroupSerializer(serializers.Serializer):
    """Serializer for joining a group with its code."""

    code = serializers.CharField(max_length=6, required=True)


class MemberSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()


class AddMemberSerializer(MemberSerializer):
    role = serializers.ChoiceField(choices=GroupRole.choices, default=GroupRole.MEMBER)


class UpdateMemberRoleSerializer(MemberSerializer):
    """Serializer for updating member role."""

    role = serializers.ChoiceField(choices=GroupRole.choices, required=True)
