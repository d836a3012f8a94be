import json
from decimal import Decimal

import pytest

from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http201, http400
from chalicelib.legacy_fields import migrate_legacy_fields, ROOM_LEGACY_FIELDS
from chalicelib.utils import db

LEGACY_ROOM_ID = '5f1c3a2e-9c1d-4a55-8d0e-1a2b3c4d5e6f'


def put_legacy_room():
    db.put_db_record({
        'partkey': keys_structure.rooms_pk,
        'sortkey': keys_structure.rooms_sk.format(room_id=LEGACY_ROOM_ID),
        'record_type': 'room',
        'id_': LEGACY_ROOM_ID,
        'name': 'Deluxe King',
        'images': ['https://files.example.com/rooms/king-1.jpg'],
        'description': 'City view',
        'highlights': ['Free Wi-Fi', 'Bathtub'],
        'date_created': '2023-05-01T12:00:00',
        'date_updated': '2023-05-01T12:00:00'
    })


def test_migrate_legacy_fields():
    migrated = migrate_legacy_fields({'name': 'Deluxe', 'title': '', 'images': ['a.jpg']}, ROOM_LEGACY_FIELDS)

    assert migrated == {'title': 'Deluxe', 'gallery': ['a.jpg'], 'schema_version': 2}


def test_migrate_keeps_canonical_value():
    migrated = migrate_legacy_fields({'name': 'Old', 'title': 'New'}, ROOM_LEGACY_FIELDS)

    assert migrated['title'] == 'New'
    assert 'name' not in migrated


def test_current_records_are_not_migrated():
    record = {'title': 'Suite', 'name': 'leftover', 'schema_version': Decimal(2)}

    assert migrate_legacy_fields(record, ROOM_LEGACY_FIELDS) is record


@pytest.mark.local_db_test
def test_create_room(make_request):
    response = make_request(endpoint='/rooms', method='POST', json_body={
        'title': 'Junior Suite',
        'amenities': ['Balcony'],
        'price_summary': {'per_night': 180},
        'old_price': 220.5
    })
    room = json.loads(response['body'])

    assert response['statusCode'] == http201
    assert room['schema_version'] == 2
    assert room['old_price'] == 220.5
    assert room['gallery'] == []


@pytest.mark.local_db_test
def test_create_room_without_title(make_request):
    response = make_request(endpoint='/rooms', method='POST', json_body={'about': 'No title'})

    assert response['statusCode'] == http400


@pytest.mark.local_db_test
def test_get_legacy_room_returns_canonical_fields(make_request):
    put_legacy_room()

    response = make_request(endpoint=f'/rooms/{LEGACY_ROOM_ID}')
    room = json.loads(response['body'])

    assert response['statusCode'] == http200
    assert room['title'] == 'Deluxe King'
    assert room['gallery'] == ['https://files.example.com/rooms/king-1.jpg']
    assert room['about'] == 'City view'
    assert room['amenities'] == ['Free Wi-Fi', 'Bathtub']
    assert room['schema_version'] == 2
    for legacy_field in ROOM_LEGACY_FIELDS:
        assert legacy_field not in room


@pytest.mark.local_db_test
def test_update_legacy_room_writes_canonical_fields(make_request):
    put_legacy_room()

    make_request(endpoint=f'/rooms/{LEGACY_ROOM_ID}', method='PUT', json_body={'check_in': '14:00'})
    db_item = db.get_db_item(keys_structure.rooms_pk, keys_structure.rooms_sk.format(room_id=LEGACY_ROOM_ID))

    assert db_item['check_in'] == '14:00'
    assert db_item['title'] == 'Deluxe King'
    assert db_item['gallery'] == ['https://files.example.com/rooms/king-1.jpg']
    assert db_item['schema_version'] == 2
