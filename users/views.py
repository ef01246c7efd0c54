import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, generics
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response

from main.exceptions import flatten_errors
from ratings.queries import owner_averages, owner_average
from .authentication import issue_token
from .filters import SortByFilter, UserFilter
from .models import User
from .permissions import IsAdmin
from .serializers import (
    UserSerializer, AdminUserSerializer, SignupSerializer, UserCreateSerializer,
    ChangePasswordSerializer, LoginSerializer
)
from .validators import validate_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = 'Invalid credentials'


def _auth_payload(user):
    return {
        'token': issue_token(user),
        'user': UserSerializer(user).data
    }


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def signup_view(request):
    """Create a normal-user account and return a token for it"""
    serializer = SignupSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'errors': flatten_errors(serializer.errors)},
            status=status.HTTP_400_BAD_REQUEST
        )

    user = serializer.save()
    return Response(_auth_payload(user), status=status.HTTP_201_CREATED)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login_view(request):
    """
    Exchange email and password for a bearer token.
    Unknown email and wrong password get the same answer.
    """
    serializer = LoginSerializer(data=request.data)
    valid = serializer.is_valid()
    email = serializer.validated_data.get('email') if valid else None
    password = serializer.validated_data.get('password') if valid else None

    if not email or not password:
        return Response(
            {'message': 'Email and password are required'},
            status=status.HTTP_400_BAD_REQUEST
        )

    user = User.objects.filter(email=User.objects.normalize_email(str(email))).first()

    if user is None or not user.check_password(str(password)):
        logger.warning(f"Failed login for {email}")
        return Response(
            {'message': INVALID_CREDENTIALS_MESSAGE},
            status=status.HTTP_401_UNAUTHORIZED
        )

    return Response(_auth_payload(user))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password_view(request):
    """Change the caller's own password"""
    serializer = ChangePasswordSerializer(data=request.data)
    valid = serializer.is_valid()
    old_password = serializer.validated_data.get('oldPassword') if valid else None
    new_password = serializer.validated_data.get('newPassword') if valid else None

    if not old_password or not new_password:
        return Response(
            {'message': 'Old and new passwords are required'},
            status=status.HTTP_400_BAD_REQUEST
        )

    password_error = validate_password(new_password)
    if password_error:
        return Response({'message': password_error}, status=status.HTTP_400_BAD_REQUEST)

    user = User.objects.filter(pk=request.user.id).first()
    if user is None:
        return Response({'message': 'User not found'}, status=status.HTTP_404_NOT_FOUND)

    if not user.check_password(old_password):
        return Response(
            {'message': 'Old password is incorrect'},
            status=status.HTTP_400_BAD_REQUEST
        )

    user.set_password(new_password)
    user.save(update_fields=['password', 'updated_at'])
    logger.info(f"Password changed for {user.email}")

    return Response({'message': 'Password updated successfully'})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_user_view(request):
    """Get current authenticated user details"""
    user = User.objects.filter(pk=request.user.id).first()
    if user is None:
        return Response({'message': 'User not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(UserSerializer(user).data)


class AdminUserListCreateView(generics.ListCreateAPIView):
    """List users with filters and sorting, or create a user of any role (Admin only)"""
    queryset = User.objects.all()
    permission_classes = [IsAuthenticated, IsAdmin]
    pagination_class = None
    filter_backends = [DjangoFilterBackend, SortByFilter]
    filterset_class = UserFilter
    sort_fields = {
        'name': 'name',
        'email': 'email',
        'address': 'address',
        'role': 'role',
        'createdAt': 'created_at',
    }

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return UserCreateSerializer
        return AdminUserSerializer

    def list(self, request, *args, **kwargs):
        users = list(self.filter_queryset(self.get_queryset()))
        owner_ids = [u.id for u in users if u.is_store_owner]
        serializer = AdminUserSerializer(
            users, many=True, context={'owner_averages': owner_averages(owner_ids)}
        )
        return Response(serializer.data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class AdminUserDetailView(generics.RetrieveAPIView):
    """Retrieve a user, with their owner average if they own stores (Admin only)"""
    queryset = User.objects.all()
    serializer_class = AdminUserSerializer
    permission_classes = [IsAuthenticated, IsAdmin]

    def get_object(self):
        user = self.get_queryset().filter(pk=self.kwargs['pk']).first()
        if user is None:
            raise NotFound('User not found')
        return user

    def retrieve(self, request, *args, **kwargs):
        user = self.get_object()
        context = {}
        if user.is_store_owner:
            context['owner_averages'] = {user.id: owner_average(user.id)}
        return Response(AdminUserSerializer(user, context=context).data)
