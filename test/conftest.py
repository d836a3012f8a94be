import json
import os
import threading
from typing import Dict, List, Optional
from urllib.parse import urlsplit

TEST_REGION = 'eu-central-1'
TEST_TABLE_NAME = 'hotel-website-test'
TEST_BUCKET_NAME = 'hotel-website-files-test'
TEST_API_URL = 'http://hotel.test'

# must be set before chalicelib is imported, boto clients read them on import
os.environ.update({
    'AWS_ACCESS_KEY_ID': 'testing',
    'AWS_SECRET_ACCESS_KEY': 'testing',
    'AWS_SECURITY_TOKEN': 'testing',
    'AWS_SESSION_TOKEN': 'testing',
    'AWS_DEFAULT_REGION': TEST_REGION,
    'AWS_REGION': TEST_REGION,
    'MAIN_BOTO_REGION': TEST_REGION,
    'GEN_TABLE_NAME': TEST_TABLE_NAME,
    'WEBSITES_FILES_BUCKET_NAME': TEST_BUCKET_NAME,
    'LOG_LEVEL': 'INFO',
})
os.environ.pop('ENDPOINT_URL', None)
os.environ.pop('UPLOADS_BASE_URL', None)

import boto3  # noqa: E402
import pytest  # noqa: E402
from chalice.cli import factory  # noqa: E402
from chalice.local import LocalGateway  # noqa: E402
from moto import mock_aws  # noqa: E402
from requests import Response, Session  # noqa: E402
from requests.adapters import BaseAdapter  # noqa: E402
from requests.structures import CaseInsensitiveDict  # noqa: E402

from chalicelib.utils import db  # noqa: E402
from chalicelib.utils.logger import log_message  # noqa: E402
from dashboard.api_client import HotelApiClient  # noqa: E402

PROJECT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def local_gateway() -> LocalGateway:
    config = factory.CLIFactory(
        project_dir=PROJECT_DIR, environ=os.environ).create_config_obj(chalice_stage_name=os.environ.get('stage', 'test'))
    log_message(f'local_gateway stage = {os.environ.get("stage", "test")}')
    return LocalGateway(config.chalice_app, config)


@pytest.fixture(scope='session')
def chalice_gateway() -> LocalGateway:
    yield local_gateway()


@pytest.fixture
def aws():
    """
    General table and files bucket in moto, fresh for every test
    """
    with mock_aws():
        boto3.resource('dynamodb', region_name=TEST_REGION).create_table(
            TableName=TEST_TABLE_NAME,
            KeySchema=[
                {'AttributeName': 'partkey', 'KeyType': 'HASH'},
                {'AttributeName': 'sortkey', 'KeyType': 'RANGE'},
            ],
            AttributeDefinitions=[
                {'AttributeName': 'partkey', 'AttributeType': 'S'},
                {'AttributeName': 'sortkey', 'AttributeType': 'S'},
            ],
            BillingMode='PAY_PER_REQUEST'
        )
        boto3.client('s3', region_name=TEST_REGION).create_bucket(
            Bucket=TEST_BUCKET_NAME,
            CreateBucketConfiguration={'LocationConstraint': TEST_REGION},
            ObjectOwnership='ObjectWriter'
        )
        db.reset_tables()
        yield
        db.reset_tables()


@pytest.fixture
def make_request(chalice_gateway, aws):
    def _make_request(endpoint: str = '/', method: str = 'GET', query: Optional[str] = None,
                      json_body=None, body=None, content_type='application/json') -> dict:
        if body is None:
            body = json.dumps(json_body) if json_body is not None else b''
        return chalice_gateway.handle_request(
            method=method,
            path=f"{endpoint}?{query}" if query else f"{endpoint}",
            headers={'Content-Type': content_type, 'Host': 'test-domain.com'},
            body=body
        )
    return _make_request


class ChaliceGatewayAdapter(BaseAdapter):
    """
    Sends requests made by HotelApiClient to the local chalice gateway.
    One request at a time, like separate lambda invocations the app never shares request state.
    """

    def __init__(self, gateway: LocalGateway):
        super().__init__()
        self.gateway = gateway
        self._lock = threading.Lock()

    def send(self, request, **kwargs):
        url = urlsplit(request.url)
        body = request.body or b''
        if hasattr(body, 'read'):
            body = body.read()
        if isinstance(body, str):
            body = body.encode('utf-8')
        headers = {'Host': url.netloc, **dict(request.headers)}
        with self._lock:
            lambda_response = self.gateway.handle_request(
                method=request.method,
                path=f'{url.path}?{url.query}' if url.query else url.path,
                headers=headers,
                body=body
            )
        response = Response()
        response.status_code = lambda_response['statusCode']
        response.headers = CaseInsensitiveDict(lambda_response.get('headers') or {})
        response_body = lambda_response.get('body') or b''
        response._content = response_body.encode('utf-8') if isinstance(response_body, str) else response_body
        response.encoding = 'utf-8'
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


@pytest.fixture
def hotel_api(chalice_gateway, aws) -> HotelApiClient:
    session = Session()
    session.mount(TEST_API_URL, ChaliceGatewayAdapter(chalice_gateway))
    return HotelApiClient(TEST_API_URL, session=session)


class FakeHotelApi:
    """
    In-memory HotelApiClient double, remembers every call.
    errors: {method: exception} or {(method, record_id): exception} raised instead of answering
    """

    def __init__(self, records=None):
        self.records: Dict[str, dict] = {record['id']: dict(record) for record in records or []}
        self.calls: List[tuple] = []
        self.errors: Dict = {}
        self.on_update = None
        self._next_id = len(self.records) + 1

    def _call(self, method, record_id=None, *args):
        self.calls.append((method, record_id, *args))
        error = self.errors.get((method, record_id)) or self.errors.get(method)
        if error is not None:
            raise error

    def calls_of(self, method) -> List[tuple]:
        return [call for call in self.calls if call[0] == method]

    def list(self, collection, **params):
        self._call('list')
        return [dict(record) for record in self.records.values()]

    def get(self, collection, record_id):
        self._call('get', record_id)
        return dict(self.records[record_id])

    def create(self, collection, body):
        self._call('create', None, body)
        record_id = f'record-{self._next_id}'
        self._next_id += 1
        orders = [record['order'] for record in self.records.values() if record.get('order') is not None]
        self.records[record_id] = {'is_active': True, **body, 'id': record_id,
                                   'order': max(orders) + 1 if orders else 1}
        return {**self.records[record_id], 'message': 'Record successfully created'}

    def update(self, collection, record_id, body):
        if self.on_update is not None:
            self.on_update(record_id, body)
        self._call('update', record_id, body)
        self.records[record_id].update(body)
        return {'message': 'Record was successfully updated', 'id': record_id}

    def delete(self, collection, record_id):
        self._call('delete', record_id)
        del self.records[record_id]
        return {'message': 'Record was successfully deleted', 'id': record_id}

    def upload(self, folder, upload_file):
        self._call('upload', upload_file.filename)
        return {'url': f'https://files.example.com/{folder}/{upload_file.filename}',
                'public_id': f'{folder}/{upload_file.filename}'}


@pytest.fixture
def fake_api() -> FakeHotelApi:
    return FakeHotelApi()
