from fastapi.testclient import TestClient

from ressly.main import create_app


def test_health(client):
    response = client.get('/api/v1/health')
    assert response.status_code == 200
    assert response.json() == {'status': 'ok', 'database': 'ok'}


def test_malformed_vote_body_is_a_validation_error(client):
    response = client.post('/api/v1/votes', content=b'not json', headers={'Content-Type': 'application/json'})
    assert response.status_code == 400
    assert response.json()['error'] == 'validation_error'


def test_injected_resources_are_left_open(database, image_store):
    app = create_app(database=database, image_store=image_store)
    with TestClient(app) as client:
        assert client.app.state.image_store is image_store
        assert client.app.state.database is database
    assert image_store.closed is False
