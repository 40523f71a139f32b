"""
Tests for server.py - Main application entry point
"""


def test_homepage_loads(client):
    """Test that the service index responds"""
    response = client.get('/')
    assert response.status_code == 200
    assert response.get_json()['service'] == 'TrueFrame'


def test_blueprint_routes_registered(app):
    """Test that all API routes are mounted under /api"""
    rules = {rule.rule for rule in app.url_map.iter_rules()}
    for route in ('/api/analyze', '/api/samples', '/api/health'):
        assert route in rules


def test_app_initialization(app):
    """Test that Flask app initializes correctly"""
    assert app is not None
    assert app.config['TESTING'] is True


def test_blueprint_count(app):
    """Test that all expected blueprints are registered"""
    assert list(app.blueprints) == ['trueframe_ai']


def test_health_check(client):
    response = client.get('/api/health')
    assert response.status_code == 200
    body = response.get_json()
    assert body['status'] == 'healthy'
    assert body['rate_limit'] == {'max_requests': 20, 'window_seconds': 60}


def test_cors_is_open(client):
    response = client.get('/api/health', headers={'Origin': 'https://somewhere.example'})
    assert response.headers['Access-Control-Allow-Origin'] == '*'


def test_cors_preflight(client):
    response = client.options('/api/analyze', headers={
        'Origin': 'https://somewhere.example',
        'Access-Control-Request-Method': 'POST',
        'Access-Control-Request-Headers': 'Content-Type',
    })
    assert response.status_code in (200, 204)
    assert response.headers['Access-Control-Allow-Origin'] == '*'
    assert 'POST' in response.headers['Access-Control-Allow-Methods']
    assert response.headers['Access-Control-Max-Age'] == '86400'
