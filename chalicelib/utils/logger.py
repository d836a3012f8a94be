import json
import os
from copy import deepcopy
from datetime import datetime, date
from decimal import Decimal
from logging import setLoggerClass, Logger, NOTSET, getLogger, StreamHandler, Formatter
from time import mktime, struct_time
from uuid import uuid4

from chalice.app import Request

SENSITIVE_HEADERS = ('authorization', 'cookie')


class CustomLogger(Logger):
    """
    Every record is prefixed with the id of the request being handled
    """

    def __init__(self, name, level=NOTSET):
        self.current_request_id = None
        super(CustomLogger, self).__init__(name, level)

    def _log(self, level, msg, args, **kwargs):
        super(CustomLogger, self)._log(level, f'[{self.current_request_id}] : {msg}', args, **kwargs)


def conf_logger(level):
    setLoggerClass(CustomLogger)
    logger_ = getLogger('hotel-website')
    console_handler = StreamHandler()
    console_handler.setLevel(level)
    formatter = Formatter('%(asctime)s - %(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)
    if logger_.hasHandlers():
        logger_.handlers.clear()
    logger_.addHandler(console_handler)
    logger_.setLevel(level)
    return logger_


logger = conf_logger(os.environ.get('LOG_LEVEL', 'DEBUG').upper())


def bind_request_id(request: Request):
    """
    Short request id is taken from the lambda context,
    a random one is generated when the context is not available
    """
    lambda_context = getattr(request, 'lambda_context', None)
    aws_request_id = getattr(lambda_context, 'aws_request_id', None) or str(uuid4())
    logger.current_request_id = aws_request_id.split('-')[-1]
    return logger.current_request_id


def log_request(request: Request):
    request_dict = deepcopy({key: value for key, value in request.to_dict().items() if key != 'lambda_context'})
    for header in SENSITIVE_HEADERS:
        request_dict.get('headers', {}).pop(header, None)
    logger.info(f"Request: {json.dumps(request_dict, cls=CustomJSONEncoder)}")
    if request_dict.get('headers', {}).get('content-type', '').startswith('application/json'):
        logger.debug(f"Request body: {str(request.raw_body)}")


class CustomJSONEncoder(json.JSONEncoder):
    def default(self, value):
        if isinstance(value, datetime):
            return str(value)
        if isinstance(value, date):
            return str(value)
        if isinstance(value, Decimal):
            return float(value)
        if isinstance(value, struct_time):
            return str(datetime.fromtimestamp(mktime(value)))
        if isinstance(value, bytes):
            return f'<{len(value)} bytes>'
        return super(CustomJSONEncoder, self).default(value)


def log_exception(error: Exception, status_code: int = 400, msg: str = "", *args, **kwargs):
    allowed_log_levels = {
        'info': logger.info,
        'warning': logger.warning,
        'debug': logger.debug,
        'error': logger.error,
        'exception': logger.exception,
    }
    level = getattr(error, 'LEVEL', 'exception')
    log_level = 'exception' if level not in allowed_log_levels.keys() else level
    allowed_log_levels[log_level](msg=json.dumps({
        'error': str(error),
        'exception': error.__class__.__name__,
        'message': str(msg),
        'level': log_level,
        'status_code': status_code,
        'args': args,
        'kwargs': kwargs
    }, cls=CustomJSONEncoder))


def log_message(*args):
    logger.debug(msg=f'{", ".join([str(i) for i in args])}')
