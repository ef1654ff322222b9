from io import StringIO

import pytest
from django.core.management import call_command
from rest_framework.test import APIClient
from rest_framework.throttling import ScopedRateThrottle

from core.models import User

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def seeded(settings):
    settings.HOSPITAL_STORE = 'database'
    call_command('populate_data', stdout=StringIO())


def login(client, username, password):
    return client.post('/api/auth/login', {'username': username, 'password': password}, format='json')


def test_login_success_shape():
    r = login(APIClient(), 'admin', 'admin123')
    assert r.status_code == 200
    body = r.json()
    assert body['success'] is True
    assert body['message'] == 'Authentication successful'
    assert body['user']['username'] == 'admin'
    assert body['user']['role'] == 'admin'
    assert 'password' not in body['user']


def test_login_counts_each_success_once():
    client = APIClient()
    for _ in range(3):
        assert login(client, 'nurse', 'nurse123').status_code == 200
    u = User.objects.get(username='nurse')
    assert u.login_count == 3
    assert len(u.login_history) == 3


def test_invalid_credentials_are_indistinguishable():
    client = APIClient()
    wrong_password = login(client, 'admin', 'wrong')
    unknown_user = login(client, 'nobody', 'admin123')
    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {
        'success': False, 'error': 'Invalid credentials', 'code': 'invalid_credentials',
    }
    assert User.objects.get(username='admin').login_count == 0


@pytest.mark.parametrize('payload', [{}, {'username': 'admin'}, {'password': 'x'}, {'username': '', 'password': ''}])
def test_missing_fields_are_400(payload):
    r = APIClient().post('/api/auth/login', payload, format='json')
    assert r.status_code == 400
    assert r.json()['error'] == 'Username and password are required'


def test_passwords_are_hashed():
    u = User.objects.get(username='doctor')
    assert u.password != 'doctor123'
    assert u.check_password('doctor123')


def test_no_role_escalation_through_login():
    r = APIClient().post('/api/auth/login', {'username': 'nurse', 'password': 'nurse123', 'role': 'admin'},
                         format='json')
    assert r.status_code == 200
    assert r.json()['user']['role'] == 'user'
    assert User.objects.get(username='nurse').role == 'user'


def test_login_is_throttled(monkeypatch):
    # rates are read into the class when DRF loads
    monkeypatch.setattr(ScopedRateThrottle, 'THROTTLE_RATES', {'login': '2/min'})
    client = APIClient()
    assert login(client, 'admin', 'bad').status_code == 401
    assert login(client, 'admin', 'bad').status_code == 401
    r = login(client, 'admin', 'admin123')
    assert r.status_code == 429
    assert r.json()['success'] is False


def test_unexpected_errors_are_generic(monkeypatch):
    from core.services import reports

    def explode(store, threshold=None):
        raise KeyError('secret internal detail')

    monkeypatch.setattr(reports, 'dashboard', explode)
    r = APIClient().get('/api/dashboard')
    assert r.status_code == 500
    assert r.json() == {'success': False, 'error': 'Internal server error', 'code': 'server_error'}


def test_ensure_test_users_resets_passwords():
    u = User.objects.get(username='receptionist')
    u.set_password('changed')
    u.save()
    call_command('ensure_test_users', stdout=StringIO())
    assert User.objects.get(username='receptionist').check_password('reception123')


def test_healthz_hides_database_errors(monkeypatch):
    from django.db import DatabaseError

    from core.views import health

    class DownConnection:
        def cursor(self):
            raise DatabaseError('password authentication failed for user "hospital"')

    monkeypatch.setattr(health, 'connections', {'default': DownConnection()})
    r = APIClient().get('/healthz')
    assert r.status_code == 503
    assert r.json() == {'ok': False, 'mode': 'database', 'db': False}
