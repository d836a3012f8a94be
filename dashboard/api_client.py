from typing import Dict, List, Optional

import requests
from requests.exceptions import RequestException
from requests_toolbelt.multipart.encoder import MultipartEncoder

from chalicelib.utils.logger import logger, log_exception
from dashboard.errors import ApiError, TransportError

GENERIC_TRANSPORT_ERROR = 'Could not reach the server, please try again'


class HotelApiClient:
    """
    Thin wrapper over the hotel REST service.
    Every method returns the decoded JSON body or raises ApiError/TransportError.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout=None):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs):
        url = f'{self.base_url}/{path.lstrip("/")}'
        logger.info(f'HotelApiClient ::: {method} {url}')
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except RequestException as error:
            log_exception(error, msg=f'HotelApiClient ::: {method} {url} failed')
            raise TransportError(GENERIC_TRANSPORT_ERROR) from error

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            if isinstance(body, dict) and body.get('error'):
                message = body['error']
            else:
                message = f'Request failed with status {response.status_code}'
            logger.warning(f'HotelApiClient ::: {method} {url} status={response.status_code} error={message}')
            raise ApiError(message, status_code=response.status_code, body=body)

        if body is None:
            raise TransportError('Server returned an unreadable response')
        return body

    def list(self, collection: str, **params) -> List[Dict]:
        return self._request('GET', collection, params=params or None)

    def get(self, collection: str, record_id: str) -> Dict:
        return self._request('GET', f'{collection}/{record_id}')

    def create(self, collection: str, body: Dict) -> Dict:
        return self._request('POST', collection, json=body)

    def update(self, collection: str, record_id: str, body: Dict) -> Dict:
        return self._request('PUT', f'{collection}/{record_id}', json=body)

    def delete(self, collection: str, record_id: str) -> Dict:
        return self._request('DELETE', f'{collection}/{record_id}')

    def upload(self, folder: str, upload_file) -> Dict:
        """
        upload_file is anything with filename, content and content_type, see dashboard.uploads.UploadFile
        """
        multipart_data = MultipartEncoder(
            fields={'file': (upload_file.filename, upload_file.content, upload_file.content_type)}
        )
        return self._request(
            'POST', 'upload',
            params={'folder': folder},
            data=multipart_data,
            headers={'Content-Type': multipart_data.content_type}
        )
