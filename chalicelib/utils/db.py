import functools
import os
from random import uniform
from time import sleep
from typing import Dict, List, Optional

import boto3 as boto3
from botocore.exceptions import ClientError

from chalicelib.utils import exceptions
from chalicelib.utils.boto_clients import aws_config_ddb
from chalicelib.utils.logger import logger

# For safe db operations
RETRY_EXCEPTIONS = ('ProvisionedThroughputExceededException', 'ThrottlingException')
need_return_capacity = ('put_item', 'get_item', 'update_item', 'delete_item')

MAX_RETRIES = 15
MAX_BACKOFF_SECONDS = 5

_TABLES: Dict[str, boto3.session.Session.resource] = {}


def exp_db_backoff(func):
    """
        should be used for any atomic
        get/put item in the code
    """
    if func.__name__ not in need_return_capacity:
        raise RuntimeError("This decorator only for DynamoDB methods")

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger.debug(f'{func.__name__}:: args={args}, kwargs={kwargs}')
        kwargs.update({'ReturnConsumedCapacity': 'TOTAL'})

        for retries in range(MAX_RETRIES):
            try:
                result = func(*args, **kwargs)
                logger.info(f'{func.__name__}:: SUCCESS')
                return result
            except ClientError as e:
                error_code = e.response.get('Error', {}).get('Code')
                if error_code not in RETRY_EXCEPTIONS:
                    logger.warning(f'{func.__name__}:: {error_code=}, {e}')
                    raise
                timeout = min(MAX_BACKOFF_SECONDS, 0.05 * 2 ** retries) * uniform(0.1, 0.99)
                logger.warning(f'{func.__name__}:: {error_code=}, retry #{retries + 1} in {timeout:.2f}s')
                sleep(timeout)

        raise exceptions.NumberOfRetriesExceeded(
            f"MaxNumber={MAX_RETRIES} of DB retries has exceeded"
        )

    return wrapper


def get_table(table_name: str) -> boto3.session.Session.resource:
    gl_table = _TABLES.get(table_name)
    if gl_table is None:
        if os.environ.get('ENDPOINT_URL'):
            gl_table = boto3.resource('dynamodb', endpoint_url=os.environ.get('ENDPOINT_URL')).Table(table_name)
        else:
            gl_table = boto3.resource('dynamodb', config=aws_config_ddb).Table(table_name)

        gl_table.put_item = exp_db_backoff(gl_table.put_item)
        gl_table.get_item = exp_db_backoff(gl_table.get_item)
        gl_table.update_item = exp_db_backoff(gl_table.update_item)
        gl_table.delete_item = exp_db_backoff(gl_table.delete_item)
        _TABLES[table_name] = gl_table

    return gl_table


def reset_tables():
    _TABLES.clear()


def get_gen_table():
    return get_table(os.environ.get('GEN_TABLE_NAME'))


def put_db_record(item: dict, table=get_gen_table):
    table().put_item(Item=item)


def update_db_record(key: dict, update_body: dict, allowed_attrs_to_update: list,
                     allowed_attrs_to_delete: list, table=get_gen_table):
    set_expr, expr_attr_values, set_attr_names, remove_expr, remove_attr_names = generate_update_expression(
        update_body=update_body,
        allowed_attrs_to_update=allowed_attrs_to_update,
        allowed_attrs_to_delete=allowed_attrs_to_delete
    )
    update_item_dict = {
        "Key": key,
        "ReturnValues": "UPDATED_NEW",
        "ConditionExpression": "attribute_exists(partkey)",
    }

    try:
        set_response = None
        if set_expr:
            set_item_dict = {
                **update_item_dict,
                "UpdateExpression": set_expr,
                "ExpressionAttributeValues": expr_attr_values,
                "ExpressionAttributeNames": set_attr_names
            }
            set_response = table().update_item(**set_item_dict)

        remove_response = None
        if remove_expr:
            remove_item_dict = {
                **update_item_dict,
                "UpdateExpression": remove_expr,
                "ExpressionAttributeNames": remove_attr_names
            }
            remove_response = table().update_item(**remove_item_dict)
    except ClientError as error:
        if error.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException':
            raise exceptions.RecordNotFound(f'record partkey={key.get("partkey")} '
                                            f'sortkey={key.get("sortkey")} not found')
        raise

    return set_response, remove_response


def generate_update_expression(update_body: dict, allowed_attrs_to_update: list, allowed_attrs_to_delete: list):
    """
    Generate expressions to update and delete attributes.
    if a key of update_body is empty - the attribute is deleted, else - attribute is updated
    Attribute names are always passed as placeholders, 'order', 'status', 'name' etc. are reserved words
    """
    expr_attr_values = {}
    set_attr_names = {}
    remove_attr_names = {}
    set_parts = []
    remove_parts = []
    for field in allowed_attrs_to_update:
        field_value = update_body.get(field, None)
        if field_value is None:
            continue
        # if field is in update_body but is equal to empty string, list etc. - delete field
        if field_value in ['', [], {}] and field in allowed_attrs_to_delete:
            remove_attr_names[f"#{field}"] = field
            remove_parts.append(f"#{field}")
        else:
            # if field is in update_body and has a real value - update field
            set_attr_names[f"#{field}"] = field
            expr_attr_values[f":{field}"] = field_value
            set_parts.append(f'#{field}=:{field}')

    set_expr = f'SET {", ".join(set_parts)}' if set_parts else None
    remove_expr = f'REMOVE {", ".join(remove_parts)}' if remove_parts else None
    return set_expr, expr_attr_values, set_attr_names, remove_expr, remove_attr_names


def delete_db_record(partkey, sortkey, table=get_gen_table):
    try:
        table().delete_item(
            Key={'partkey': partkey, 'sortkey': sortkey},
            ConditionExpression='attribute_exists(partkey)'
        )
    except ClientError as error:
        if error.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException':
            logger.error(f"delete_db_record ::: record partkey={partkey} sortkey={sortkey} not found")
            raise exceptions.RecordNotFound(f'record partkey={partkey} sortkey={sortkey} not found')
        raise


def get_db_item(partkey, sortkey, table=get_gen_table):
    result = table().get_item(
        Key={
            'partkey': partkey,
            'sortkey': sortkey
        }
    )

    if result.__contains__('Item'):
        return result['Item']
    else:
        logger.error(f"get_db_item ::: record partkey={partkey} sortkey={sortkey} not found")
        raise exceptions.RecordNotFound(f'record partkey={partkey} sortkey={sortkey} not found')


def query_items_paginated(
        key_condition_expression,
        filter_expression=None,
        projection_expression=None,
        table=get_gen_table,
        index_name=None,
        expr_attr_names=None,
        limit=None,
        start_key=None
):
    kwargs = {'KeyConditionExpression': key_condition_expression}
    if filter_expression:
        kwargs.update({'FilterExpression': filter_expression})

    if projection_expression:
        kwargs.update({'ProjectionExpression': projection_expression})

    if expr_attr_names:
        kwargs.update({'ExpressionAttributeNames': expr_attr_names})

    if limit:
        kwargs.update({'Limit': int(limit)})

    if index_name:
        kwargs.update({'IndexName': index_name})

    if start_key:
        kwargs.update({'ExclusiveStartKey': start_key})

    resp = table().query(**kwargs)
    return resp['Items'], resp.get('LastEvaluatedKey')


def query_items_paged(key_condition_expression, filter_expression=None, projection_expression=None,
                      table=get_gen_table, index_name=None, expr_attr_names=None) -> List[Dict]:
    """ This method shall be used whenever you think the query will
        return more than 1mb of data at once"""
    all_items = []
    last_evaluated_key: Optional[Dict] = None
    while True:
        items, last_evaluated_key = query_items_paginated(
            key_condition_expression,
            filter_expression=filter_expression,
            projection_expression=projection_expression,
            table=table,
            index_name=index_name,
            expr_attr_names=expr_attr_names,
            start_key=last_evaluated_key
        )
        all_items.extend(items)
        if last_evaluated_key is None:
            return all_items
