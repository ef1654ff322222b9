import json

import pytest
import requests

from hospital_client import ApiError, BackendResolver, BackendUnavailable, HospitalClient, OfflineCache


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason='OK'):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason

    def json(self):
        if self._payload is None:
            raise ValueError('no body')
        return self._payload


class FakeSession:
    """Routes ``(method, url)`` to canned responses; ``None`` means connection refused."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def _answer(self, method, url):
        self.calls.append((method, url))
        answer = self.routes.get((method, url))
        if answer is None:
            raise requests.ConnectionError(f'refused: {url}')
        return answer

    def get(self, url, timeout=None, **kwargs):
        return self._answer('GET', url)

    def request(self, method, url, timeout=None, **kwargs):
        return self._answer(method, url)


HEALTHY = FakeResponse(payload={'status': 'Server is healthy', 'mode': 'database'})


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_resolver_picks_first_live_candidate_and_caches_it():
    session = FakeSession({('GET', 'http://b:8000/api/health'): HEALTHY})
    clock = Clock()
    resolver = BackendResolver(['http://a:8000', 'http://b:8000/'], ttl=30, session=session, clock=clock)
    assert resolver.resolve() == 'http://b:8000'
    assert resolver.mode == 'database'
    probes = len(session.calls)
    assert resolver.resolve() == 'http://b:8000'
    assert len(session.calls) == probes

    clock.now = 31
    resolver.resolve()
    assert len(session.calls) > probes


def test_resolver_invalidate_forces_reprobe():
    session = FakeSession({('GET', 'http://a:8000/api/health'): HEALTHY})
    resolver = BackendResolver(['http://a:8000'], session=session)
    resolver.resolve()
    resolver.invalidate()
    resolver.resolve()
    assert session.calls.count(('GET', 'http://a:8000/api/health')) == 2


def test_resolver_raises_when_nothing_answers():
    resolver = BackendResolver(['http://a:8000'], session=FakeSession({}))
    with pytest.raises(BackendUnavailable):
        resolver.resolve()


@pytest.mark.parametrize('answer', [
    FakeResponse(payload=None),
    FakeResponse(payload=['not', 'health']),
    FakeResponse(payload={'status': 'ok'}),
])
def test_resolver_skips_candidates_that_are_not_the_backend(answer):
    session = FakeSession({
        ('GET', 'http://a:3000/api/health'): answer,
        ('GET', 'http://b:8000/api/health'): HEALTHY,
    })
    resolver = BackendResolver(['http://a:3000', 'http://b:8000'], session=session)
    assert resolver.resolve() == 'http://b:8000'


def test_resolver_with_only_foreign_candidates_is_unavailable():
    session = FakeSession({('GET', 'http://a:3000/api/health'): FakeResponse(payload=None)})
    with pytest.raises(BackendUnavailable):
        BackendResolver(['http://a:3000'], session=session).resolve()


def test_resolver_reads_candidates_from_env(monkeypatch):
    monkeypatch.setenv('HOSPITAL_API_URLS', 'http://x:1, http://y:2/')
    assert BackendResolver(session=FakeSession({})).candidates == ['http://x:1', 'http://y:2']


def test_offline_cache_last_write_wins(tmp_path):
    cache = OfflineCache(tmp_path / 'cache.json')
    cache.merge('patients', [{'id': 'P1', 'name': 'New', 'updatedAt': '2024-05-02T10:00:00+00:00'}])
    cache.merge('patients', [{'id': 'P1', 'name': 'Stale', 'updatedAt': '2024-05-01T10:00:00+00:00'}])
    assert cache.get('patients', 'P1')['name'] == 'New'
    cache.merge('patients', [{'id': 'P1', 'name': 'Newer', 'updatedAt': '2024-05-03T00:00:00Z'}])
    assert cache.get('patients', 'P1')['name'] == 'Newer'

    reloaded = OfflineCache(tmp_path / 'cache.json')
    assert reloaded.get('patients', 'P1')['name'] == 'Newer'


def test_offline_cache_ignores_corrupt_file(tmp_path):
    path = tmp_path / 'cache.json'
    path.write_text('{not json')
    assert OfflineCache(path).all('inventory') == []


def _client(tmp_path, routes):
    session = FakeSession(routes)
    resolver = BackendResolver(['http://api'], session=session)
    return HospitalClient(resolver=resolver, cache=OfflineCache(tmp_path / 'c.json'), session=session), session


def test_successful_read_is_returned_as_is_and_cached(tmp_path):
    server_items = [{'name': 'Gauze', 'stock': 5, 'price': 8.0, 'category': 'surgical'}]
    client, _ = _client(tmp_path, {
        ('GET', 'http://api/api/health'): HEALTHY,
        ('GET', 'http://api/api/inventory'): FakeResponse(payload=server_items),
    })
    client.cache.merge('inventory', [{'name': 'Gauze', 'stock': 999}], key='name')
    snap = client.inventory()
    assert snap.offline is False
    assert snap.data == server_items
    assert client.cache.get('inventory', 'Gauze')['stock'] == 5


def test_offline_read_falls_back_to_cache(tmp_path):
    client, session = _client(tmp_path, {})
    client.cache.merge('patients', [
        {'id': 'P1001', 'name': 'John Smith', 'status': 'Admitted', 'diagnosis': 'Flu'},
        {'id': 'P1002', 'name': 'Emma Johnson', 'status': 'Discharged', 'diagnosis': 'Asthma'},
    ])
    snap = client.patients(status='admitted')
    assert snap.offline is True
    assert [p['id'] for p in snap.data] == ['P1001']


def test_backend_dropping_mid_session_invalidates_resolver(tmp_path):
    client, session = _client(tmp_path, {('GET', 'http://api/api/health'): HEALTHY})
    snap = client.inventory()
    assert snap.offline is True
    assert client.resolver._url is None


def test_api_errors_carry_status_and_message(tmp_path):
    client, _ = _client(tmp_path, {
        ('GET', 'http://api/api/health'): HEALTHY,
        ('POST', 'http://api/api/sales'): FakeResponse(400, {'success': False, 'error': 'Insufficient stock',
                                                            'code': 'insufficient_stock'}),
        ('POST', 'http://api/api/auth/login'): FakeResponse(401, {'success': False, 'error': 'Invalid credentials'}),
    })
    with pytest.raises(ApiError) as exc:
        client.process_sale('Gauze', 500)
    assert (exc.value.status, exc.value.message, exc.value.code) == (400, 'Insufficient stock', 'insufficient_stock')
    with pytest.raises(ApiError) as exc:
        client.login('admin', 'nope')
    assert exc.value.status == 401


def test_writes_do_not_fall_back(tmp_path):
    client, _ = _client(tmp_path, {})
    with pytest.raises(BackendUnavailable):
        client.generate_bill('P1001', [{'service': 'ECG'}])


def test_bill_result_updates_patient_cache(tmp_path):
    patient = {'id': 'P1001', 'status': 'Discharged', 'updatedAt': '2030-01-01T00:00:00+00:00'}
    client, _ = _client(tmp_path, {
        ('GET', 'http://api/api/health'): HEALTHY,
        ('POST', 'http://api/api/billing'): FakeResponse(201, {'bill': {'id': 'BX'}, 'patient': patient}),
    })
    client.cache.merge('patients', [{'id': 'P1001', 'status': 'Admitted', 'updatedAt': '2024-01-01T00:00:00+00:00'}])
    client.generate_bill('P1001', [{'service': 'Discharge Processing'}])
    assert client.cache.get('patients', 'P1001')['status'] == 'Discharged'
    assert json.loads((tmp_path / 'c.json').read_text())['patients']['P1001']['status'] == 'Discharged'


def test_foreign_health_answer_serves_reads_from_cache(tmp_path):
    client, _ = _client(tmp_path, {('GET', 'http://api/api/health'): FakeResponse(payload=None)})
    client.cache.merge('inventory', [{'name': 'Gauze', 'stock': 5, 'category': 'surgical'}], key='name')
    snap = client.inventory()
    assert snap.offline is True
    assert [i['name'] for i in snap.data] == ['Gauze']


def test_server_error_on_read_serves_cache(tmp_path):
    client, _ = _client(tmp_path, {
        ('GET', 'http://api/api/health'): HEALTHY,
        ('GET', 'http://api/api/inventory'): FakeResponse(500, {'success': False, 'error': 'Internal server error',
                                                                'code': 'server_error'}),
        ('GET', 'http://api/api/patients'): FakeResponse(503, None, reason='Service Unavailable'),
    })
    client.cache.merge('inventory', [{'name': 'Gauze', 'stock': 5, 'category': 'surgical'}], key='name')
    client.cache.merge('patients', [{'id': 'P1001', 'name': 'John Smith', 'status': 'Admitted'}])

    snap = client.inventory()
    assert snap.offline is True
    assert [i['name'] for i in snap.data] == ['Gauze']
    snap = client.patients()
    assert snap.offline is True
    assert [p['id'] for p in snap.data] == ['P1001']


def test_client_error_on_read_is_raised(tmp_path):
    client, _ = _client(tmp_path, {
        ('GET', 'http://api/api/health'): HEALTHY,
        ('GET', 'http://api/api/inventory'): FakeResponse(400, {'success': False, 'error': 'Invalid category'}),
    })
    with pytest.raises(ApiError) as exc:
        client.inventory(category='snacks')
    assert exc.value.status == 400
