"""
Username/password login.

The API issues no tokens: a successful login returns the account (without
any password material) and the client keeps its own session.
"""
from __future__ import annotations

from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.serializers.auth import LoginSerializer
from core.services.accounts import login


@api_view(['POST'])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    account = login(request.store, s.validated_data['username'], s.validated_data['password'])
    return Response({
        'success': True,
        'message': 'Authentication successful',
        'user': account.as_json(),
    })


# ScopedRateThrottle reads throttle_scope from the view class
login_view.cls.throttle_scope = 'login'
