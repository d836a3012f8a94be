import json
import os

from chalice.test import Client
from app import app

PROJECT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def test_index():
    with Client(app, stage_name='test', project_dir=PROJECT_DIR) as client:
        response = client.http.get('/health-check')
        assert response.json_body == {'health': 'check'}


def test_every_collection_has_crud_routes():
    for collection in ('banners', 'banquet-gallery', 'testimonials', 'blog', 'rooms', 'restaurants',
                       'bookings', 'restaurant-bookings', 'proposals'):
        assert set(app.routes[f'/{collection}'].keys()) == {'GET', 'POST'}
    assert set(app.routes['/banners/{record_id}'].keys()) == {'GET', 'PUT', 'DELETE'}
    assert set(app.routes['/restaurants/{identifier}'].keys()) == {'GET', 'PUT', 'DELETE'}


def test_unknown_record_returns_404(make_request):
    response = make_request(endpoint='/banners/not-existing-id')
    body = json.loads(response['body'])

    assert response['statusCode'] == 404
    assert body['exception'] == 'RecordNotFound'
    assert {'error', 'exception', 'message', 'error_id', 'level'} <= set(body.keys())


def test_invalid_json_returns_400(make_request):
    response = make_request(endpoint='/banners', method='POST', body='{not a json')

    assert response['statusCode'] == 400
    assert json.loads(response['body'])['exception'] == 'ValidationException'


def test_delete_missing_record_returns_404(make_request):
    response = make_request(endpoint='/testimonials/not-existing-id', method='DELETE')

    assert response['statusCode'] == 404
