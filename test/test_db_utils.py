from unittest.mock import patch

import pytest
from botocore.exceptions import ClientError

from chalicelib.utils import db, exceptions


def client_error(code):
    return ClientError({'Error': {'Code': code, 'Message': code}}, 'UpdateItem')


def test_generate_update_expression_uses_placeholders():
    set_expr, values, set_names, remove_expr, remove_names = db.generate_update_expression(
        update_body={'order': 2, 'image': 'a.jpg', 'images': [], 'title': None},
        allowed_attrs_to_update=['order', 'image', 'images', 'title'],
        allowed_attrs_to_delete=['images']
    )

    assert set_expr == 'SET #order=:order, #image=:image'
    assert values == {':order': 2, ':image': 'a.jpg'}
    assert set_names == {'#order': 'order', '#image': 'image'}
    assert remove_expr == 'REMOVE #images'
    assert remove_names == {'#images': 'images'}


def test_backoff_only_wraps_dynamodb_methods():
    def scan():
        pass

    with pytest.raises(RuntimeError):
        db.exp_db_backoff(scan)


def test_backoff_retries_throttling():
    results = [client_error('ThrottlingException'), client_error('ProvisionedThroughputExceededException'), 'ok']

    def update_item(**kwargs):
        result = results.pop(0)
        if isinstance(result, Exception):
            raise result
        return kwargs

    with patch.object(db, 'sleep') as sleep:
        assert db.exp_db_backoff(update_item)(Key={})['ReturnConsumedCapacity'] == 'TOTAL'
    assert sleep.call_count == 2


def test_backoff_raises_other_errors():
    def get_item(**kwargs):
        raise client_error('ValidationException')

    with pytest.raises(ClientError):
        db.exp_db_backoff(get_item)()


def test_backoff_gives_up():
    def put_item(**kwargs):
        raise client_error('ThrottlingException')

    with patch.object(db, 'sleep'), pytest.raises(exceptions.NumberOfRetriesExceeded):
        db.exp_db_backoff(put_item)()
