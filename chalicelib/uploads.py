import os
from email.message import Message
from io import BytesIO
from typing import Tuple, Dict, NamedTuple
from uuid import uuid4

from PIL import Image, UnidentifiedImageError
from chalice import Response
from requests_toolbelt.multipart.decoder import MultipartDecoder, ImproperBodyPartContentException, \
    NonMultipartContentTypeException

from chalicelib.constants.constants import UPLOAD_MAX_SIZE, DEFAULT_UPLOAD_FOLDER, IMAGE_FORMAT_EXTENSIONS, MB
from chalicelib.constants.status_codes import http200
from chalicelib.utils import app as utils_app
from chalicelib.utils.exceptions import MandatoryFieldsAreNotFilled, UploadRejected
from chalicelib.utils.logger import logger
from chalicelib.utils.s3 import upload_file_to_s3, get_public_url

FILE_FIELD_NAME = 'file'


class UploadedFile(NamedTuple):
    filename: str
    content_type: str
    content: bytes


def get_resize_width_height(image: Image, max_width: int) -> Tuple[int, int]:
    width, height = image.size
    divider = max([width, height]) / max_width
    return int(width / divider), int(height / divider)


def _disposition_params(disposition: str) -> Tuple[str, str]:
    message = Message()
    message['content-disposition'] = disposition
    return message.get_param('name', header='content-disposition'), \
        message.get_param('filename', header='content-disposition')


def parse_multipart_request_data(current_request) -> Dict[str, UploadedFile]:
    content_type = current_request.headers.get('content-type', '')
    try:
        decoder = MultipartDecoder(current_request.raw_body or b'', content_type)
    except (ImproperBodyPartContentException, NonMultipartContentTypeException) as error:
        raise UploadRejected(f'Request body is not a valid multipart form: {error}')
    parts = {}
    for part in decoder.parts:
        name, filename = _disposition_params(part.headers.get(b'Content-Disposition', b'').decode('utf-8'))
        if name:
            parts[name] = UploadedFile(
                filename=filename or '',
                content_type=part.headers.get(b'Content-Type', b'').decode('utf-8'),
                content=part.content
            )
    return parts


def validate_image_file(uploaded_file: UploadedFile, max_size: int = UPLOAD_MAX_SIZE) -> None:
    if uploaded_file is None or not uploaded_file.content:
        raise MandatoryFieldsAreNotFilled('No file provided')
    if not uploaded_file.content_type.startswith('image/'):
        raise UploadRejected('File must be an image')
    if len(uploaded_file.content) > max_size:
        raise UploadRejected(f'File size must be less than {max_size // MB}MB')


def get_upload_folder(current_request) -> str:
    folder = (utils_app.get_query_param(current_request, 'folder') or DEFAULT_UPLOAD_FOLDER).strip('/')
    if not folder or '..' in folder.split('/'):
        raise UploadRejected(f'Wrong upload folder {folder}')
    return folder


def normalize_image(content: bytes) -> Tuple[bytes, str]:
    """
    Checks the file is a real image and downscales it to MAX_IMG_WIDTH,
    the original format is kept
    """
    try:
        image = Image.open(BytesIO(content))
        image.load()
    except (UnidentifiedImageError, OSError) as error:
        raise UploadRejected(f'File is not a valid image: {error}')
    image_format = image.format
    if image_format not in IMAGE_FORMAT_EXTENSIONS:
        raise UploadRejected(f'Image format {image_format} is not supported')

    max_width = int(os.environ.get('MAX_IMG_WIDTH', 2560))
    if max(image.size) <= max_width:
        return content, image_format

    logger.info(f'normalize_image ::: resizing {image.size=} to {max_width=}')
    image = image.resize(size=get_resize_width_height(image, max_width))
    if image_format == 'JPEG' and image.mode not in ('RGB', 'L'):
        image = image.convert('RGB')
    buf = BytesIO()
    image.save(buf, format=image_format, optimize=True, quality=90)
    return buf.getvalue(), image_format


@utils_app.request_exception_handler
@utils_app.log_start_finish
def image_upload(current_request) -> Response:
    folder = get_upload_folder(current_request)
    uploaded_file = parse_multipart_request_data(current_request).get(FILE_FIELD_NAME)
    validate_image_file(uploaded_file)

    content, image_format = normalize_image(uploaded_file.content)
    public_id = f'{folder}/{uuid4()}'
    file_path = f'{public_id}.{IMAGE_FORMAT_EXTENSIONS[image_format]}'
    upload_file_to_s3(content, file_path, Image.MIME.get(image_format, uploaded_file.content_type))
    logger.info(f'image_upload ::: {uploaded_file.filename=} uploaded to {file_path=}')
    return Response(status_code=http200, headers={"Content-Type": 'application/json'},
                    body={'url': get_public_url(file_path), 'public_id': public_id})
