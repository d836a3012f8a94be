import asyncio
import mimetypes
import os
from typing import Callable, List, NamedTuple, Optional, Tuple

from chalicelib.constants.constants import MB, UPLOAD_MAX_SIZE, UPLOAD_SIZE_LIMITS
from chalicelib.utils.logger import logger
from dashboard.errors import DashboardError, UploadRejected
from dashboard.forms import EntityForm
from dashboard.notifications import Notifier


class UploadFile(NamedTuple):
    filename: str
    content: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path) -> 'UploadFile':
        content_type, _ = mimetypes.guess_type(path)
        with open(path, 'rb') as f:
            content = f.read()
        return cls(os.path.basename(path), content, content_type or 'application/octet-stream')


class UploadFailure(NamedTuple):
    upload_file: UploadFile
    error: str


class UploadManyResult(NamedTuple):
    urls: List[str]
    failures: List[UploadFailure]


def get_size_limit(folder) -> int:
    return UPLOAD_SIZE_LIMITS.get(folder, UPLOAD_MAX_SIZE)


class UploadProxyHelper:
    """
    Turns files picked in the dashboard into public urls via POST /upload.
    Files are validated locally, a rejected file never reaches the network.
    """

    def __init__(self, api, folder: str, max_size: Optional[int] = None, notifier: Optional[Notifier] = None):
        self.api = api
        self.folder = folder
        self.max_size = max_size or get_size_limit(folder)
        self.notifier = notifier or Notifier()

    def validate(self, upload_file: UploadFile) -> None:
        if upload_file is None:
            raise UploadRejected('No file provided')
        if not (upload_file.content_type or '').startswith('image/'):
            raise UploadRejected('File must be an image')
        if upload_file.size > self.max_size:
            raise UploadRejected(f'File size must be less than {self.max_size // MB}MB')

    def upload(self, upload_file: UploadFile) -> str:
        self.validate(upload_file)
        logger.info(f'UploadProxyHelper ::: uploading {upload_file.filename} ({upload_file.size} bytes) '
                    f'to {self.folder}')
        response = self.api.upload(self.folder, upload_file)
        return response['url']

    def attach(self, form: EntityForm, field: str, upload_file: UploadFile) -> Optional[str]:
        """
        Uploads the file and puts the url to the form field.
        Failures are reported to the notifier and leave the form as it was.
        """
        try:
            url = self.upload(upload_file)
        except DashboardError as error:
            self.notifier.error(str(error), title='Upload failed')
            return None
        form.attach_url(field, url)
        return url

    async def upload_many(self, files: List[UploadFile],
                          on_progress: Optional[Callable[[int, int], None]] = None) -> UploadManyResult:
        """
        Uploads files in parallel, one failed file doesn't stop the others.
        on_progress(n, total) is called as each upload starts ("uploading n of total").
        """
        total = len(files)
        started = 0

        async def upload_one(upload_file) -> Tuple[Optional[str], Optional[str]]:
            nonlocal started
            try:
                self.validate(upload_file)
            except UploadRejected as error:
                return None, str(error)
            started += 1
            if on_progress is not None:
                on_progress(started, total)
            try:
                return await asyncio.to_thread(self.upload, upload_file), None
            except DashboardError as error:
                return None, str(error)

        results = await asyncio.gather(*[upload_one(upload_file) for upload_file in files])

        urls, failures = [], []
        for upload_file, (url, error) in zip(files, results):
            if error is None:
                urls.append(url)
            else:
                failures.append(UploadFailure(upload_file, error))
        logger.info(f'upload_many ::: {self.folder} uploaded={len(urls)} failed={len(failures)} of {total}')
        return UploadManyResult(urls, failures)
