import json

import pytest

from chalicelib.constants.status_codes import http200, http201, http400


@pytest.mark.local_db_test
def test_create_gallery_image(make_request):
    response = make_request(endpoint='/banquet-gallery', method='POST', json_body={
        'image': 'https://files.example.com/banquet-gallery/hall.jpg',
        'title': 'Grand hall'
    })
    image = json.loads(response['body'])

    assert response['statusCode'] == http201
    assert image['message'] == 'Gallery image successfully created'
    assert image['order'] == 1
    assert image['description'] == ''


@pytest.mark.local_db_test
def test_create_gallery_image_without_image(make_request):
    response = make_request(endpoint='/banquet-gallery', method='POST', json_body={'title': 'Grand hall'})

    assert response['statusCode'] == http400
    assert json.loads(response['body'])['error'] == 'Field image is required'


@pytest.mark.local_db_test
def test_gallery_update_skips_unknown_fields(make_request):
    image = json.loads(make_request(endpoint='/banquet-gallery', method='POST', json_body={
        'image': 'https://files.example.com/banquet-gallery/hall.jpg'
    })['body'])

    response = make_request(endpoint=f'/banquet-gallery/{image["id"]}', method='PUT',
                            json_body={'title': 'Terrace', 'colour': 'red', 'date_created': '2000-01-01T00:00:00'})
    updated = json.loads(make_request(endpoint=f'/banquet-gallery/{image["id"]}')['body'])

    assert response['statusCode'] == http200
    assert updated['title'] == 'Terrace'
    assert updated['date_created'] == image['date_created']
    assert 'colour' not in updated


@pytest.mark.local_db_test
def test_gallery_update_with_wrong_order(make_request):
    image = json.loads(make_request(endpoint='/banquet-gallery', method='POST', json_body={
        'image': 'https://files.example.com/banquet-gallery/hall.jpg'
    })['body'])

    response = make_request(endpoint=f'/banquet-gallery/{image["id"]}', method='PUT',
                            json_body={'title': 'Terrace', 'order': 'first'})
    updated = json.loads(make_request(endpoint=f'/banquet-gallery/{image["id"]}')['body'])

    assert response['statusCode'] == http400
    assert updated['title'] == ''
    assert updated['order'] == 1
