import json
import re
from decimal import Decimal, InvalidOperation

from chalicelib.utils.exceptions import ValidationException


def replace_dict_key(item, orig_key, new_key):
    if orig_key in item:
        if new_key not in item:
            item[new_key] = item[orig_key]
        del item[orig_key]


def substitute_keys(dict_to_process: dict, base_keys: dict, opt_dict=None):
    if opt_dict is None:
        opt_dict = {}
    all_keys = {**base_keys, **opt_dict}
    for key, val in all_keys.items():
        if val:
            replace_dict_key(dict_to_process, key, val)
        elif key in dict_to_process.keys():
            dict_to_process.pop(key, None)


def parse_raw_body(chalice_request):
    request_raw_body = chalice_request.raw_body
    if not request_raw_body:
        return {}
    try:
        item = json.loads(request_raw_body)
    except ValueError as error:
        raise ValidationException(f'Request body is not a valid JSON: {error}')
    if not isinstance(item, dict):
        raise ValidationException('Request body should be a JSON object')
    return fix_values_from_ui(item=item)


def fix_values_from_ui(item):
    """
    Remove keys with empty or None values and transform float to Decimal
    """
    if item.get('_values_from_ui_strategy') == 'delete_empty':
        list_to_cleanup = ['', None]
    else:
        list_to_cleanup = [None]
    item = cleanup_dict(item, list_to_cleanup)
    item.pop('_values_from_ui_strategy', None)
    result = json.dumps(item)
    return json.loads(result, parse_float=Decimal)


def cleanup_dict(item: dict, list_of_values: list):
    """ Remove None fields in dict with. Supports one nesting.  """

    def sub_clean(sub_item):
        return {
            key: value
            for key, value in sub_item.items()
            if value not in list_of_values
        }

    clean = {}
    for k, v in item.items():
        if isinstance(v, dict):
            nested = sub_clean(v)
            if len(nested.keys()) > 0:
                clean[k] = nested
        elif v not in list_of_values:
            clean[k] = v
    return clean


def to_int(value):
    """ DynamoDB gives numbers back as Decimal, UI sends int """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return int(value)
    return None


def to_decimal(value, exp='1.00'):
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    try:
        return Decimal(str(value)).quantize(Decimal(exp))
    except InvalidOperation:
        return None


def slugify(value: str) -> str:
    value = re.sub(r'[^\w\s-]', '', (value or '').lower())
    return re.sub(r'[-\s_]+', '-', value).strip('-')
