import json
from io import BytesIO

import boto3
import pytest
from PIL import Image
from requests_toolbelt.multipart.encoder import MultipartEncoder

from chalicelib.constants.status_codes import http200, http400
from chalicelib.uploads import UploadedFile, validate_image_file, get_resize_width_height
from chalicelib.utils.exceptions import UploadRejected, MandatoryFieldsAreNotFilled

TEST_BUCKET_NAME = 'hotel-website-files-test'


def image_bytes(size=(40, 20), image_format='PNG') -> bytes:
    buf = BytesIO()
    Image.new('RGB', size, color=(200, 120, 40)).save(buf, format=image_format)
    return buf.getvalue()


def upload(make_request, fields, folder='myriad-hotel/banners'):
    multipart_data = MultipartEncoder(fields=fields)
    return make_request(endpoint='/upload', method='POST', query=f'folder={folder}',
                        body=multipart_data.to_string(), content_type=multipart_data.content_type)


def get_uploaded_object(key):
    return boto3.client('s3', region_name='eu-central-1').get_object(Bucket=TEST_BUCKET_NAME, Key=key)


def test_get_resize_width_height():
    image = Image.new('RGB', (5120, 2560))

    assert get_resize_width_height(image, 2560) == (2560, 1280)


def test_validate_image_file():
    validate_image_file(UploadedFile('pool.png', 'image/png', b'x' * 10), max_size=10)

    with pytest.raises(MandatoryFieldsAreNotFilled):
        validate_image_file(None)
    with pytest.raises(UploadRejected, match='File must be an image'):
        validate_image_file(UploadedFile('menu.pdf', 'application/pdf', b'%PDF'))
    with pytest.raises(UploadRejected, match='File size must be less than'):
        validate_image_file(UploadedFile('pool.png', 'image/png', b'x' * 11), max_size=10)


@pytest.mark.local_db_test
def test_upload_image(make_request):
    response = upload(make_request, {'file': ('pool.png', image_bytes(), 'image/png')})
    response_body = json.loads(response['body'])

    assert response['statusCode'] == http200
    assert response_body['public_id'].startswith('myriad-hotel/banners/')
    assert response_body['url'] == \
        f'https://{TEST_BUCKET_NAME}.s3.amazonaws.com/{response_body["public_id"]}.png'

    s3_object = get_uploaded_object(f'{response_body["public_id"]}.png')
    assert s3_object['ContentType'] == 'image/png'


@pytest.mark.local_db_test
def test_upload_large_image_is_downscaled(make_request):
    response = upload(make_request, {'file': ('hall.jpg', image_bytes((3000, 1500), 'JPEG'), 'image/jpeg')},
                      folder='myriad-hotel/banquet-gallery')
    response_body = json.loads(response['body'])

    s3_object = get_uploaded_object(f'{response_body["public_id"]}.jpg')
    assert Image.open(BytesIO(s3_object['Body'].read())).size == (2560, 1280)


@pytest.mark.local_db_test
def test_upload_without_file(make_request):
    response = upload(make_request, {'comment': 'no file here'})

    assert response['statusCode'] == http400
    assert json.loads(response['body'])['error'] == 'No file provided'


@pytest.mark.local_db_test
def test_upload_not_an_image(make_request):
    response = upload(make_request, {'file': ('menu.pdf', b'%PDF-1.4', 'application/pdf')})

    assert response['statusCode'] == http400
    assert json.loads(response['body'])['error'] == 'File must be an image'


@pytest.mark.local_db_test
def test_upload_broken_image(make_request):
    response = upload(make_request, {'file': ('pool.png', b'not really a png', 'image/png')})

    assert response['statusCode'] == http400
    assert json.loads(response['body'])['exception'] == 'UploadRejected'


@pytest.mark.local_db_test
def test_upload_to_wrong_folder(make_request):
    response = upload(make_request, {'file': ('pool.png', image_bytes(), 'image/png')}, folder='../secrets')

    assert response['statusCode'] == http400
