import json

import pytest

from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http201, http400, http404
from chalicelib.utils import db


def create_test_restaurant(make_request, **fields):
    restaurant_to_create = {
        'name': 'Sky Lounge & Grill',
        'cuisine': 'Mediterranean',
        'opening_hours': '12:00 - 23:00',
        'highlights': ['Rooftop', 'Live music'],
        'menu': {
            'starters': [{'name': 'Burrata', 'price': '14', 'description': 'Tomatoes, basil'}],
            'mains': [{'name': 'Sea bass', 'price': '29'}]
        },
        **fields
    }
    response = make_request(endpoint='/restaurants', method='POST', json_body=restaurant_to_create)
    assert response['statusCode'] == http201
    return json.loads(response['body'])


@pytest.mark.local_db_test
def test_create_restaurant(make_request):
    restaurant = create_test_restaurant(make_request)

    db_item = db.get_db_item(keys_structure.restaurants_pk,
                             keys_structure.restaurants_sk.format(restaurant_id=restaurant['id']))
    assert restaurant['slug'] == 'sky-lounge-grill'
    assert db_item['menu']['starters'][0]['name'] == 'Burrata'
    assert db_item['schema_version'] == 2


@pytest.mark.local_db_test
def test_create_restaurant_with_duplicated_slug(make_request):
    create_test_restaurant(make_request)

    response = make_request(endpoint='/restaurants', method='POST', json_body={'name': 'Sky Lounge Grill'})

    assert response['statusCode'] == http400
    assert json.loads(response['body'])['error'] == 'Restaurant with slug=sky-lounge-grill already exists'


@pytest.mark.local_db_test
def test_create_restaurant_with_wrong_menu(make_request):
    response = make_request(endpoint='/restaurants', method='POST',
                            json_body={'name': 'Bistro', 'menu': {'mains': ['Sea bass']}})

    assert response['statusCode'] == http400


@pytest.mark.local_db_test
def test_get_restaurant_by_id_and_slug(make_request):
    restaurant = create_test_restaurant(make_request)

    by_id = make_request(endpoint=f'/restaurants/{restaurant["id"]}')
    by_slug = make_request(endpoint='/restaurants/sky-lounge-grill')

    assert by_id['statusCode'] == http200
    assert json.loads(by_id['body']) == json.loads(by_slug['body'])
    assert make_request(endpoint='/restaurants/unknown-place')['statusCode'] == http404


@pytest.mark.local_db_test
def test_update_restaurant_by_slug(make_request):
    restaurant = create_test_restaurant(make_request)

    response = make_request(endpoint='/restaurants/sky-lounge-grill', method='PUT',
                            json_body={'capacity': '80 guests'})
    updated = json.loads(make_request(endpoint=f'/restaurants/{restaurant["id"]}')['body'])

    assert response['statusCode'] == http200
    assert updated['capacity'] == '80 guests'
    assert updated['name'] == 'Sky Lounge & Grill'


@pytest.mark.local_db_test
def test_update_restaurant_slug_conflict(make_request):
    create_test_restaurant(make_request)
    other = create_test_restaurant(make_request, name='Lobby Bar')

    response = make_request(endpoint=f'/restaurants/{other["id"]}', method='PUT',
                            json_body={'slug': 'sky-lounge-grill'})

    assert response['statusCode'] == http400


@pytest.mark.local_db_test
def test_delete_restaurant_by_slug(make_request):
    restaurant = create_test_restaurant(make_request)

    response = make_request(endpoint='/restaurants/sky-lounge-grill', method='DELETE')

    assert response['statusCode'] == http200
    assert json.loads(response['body'])['id'] == restaurant['id']
    assert make_request(endpoint='/restaurants')['body'] == '[]'
