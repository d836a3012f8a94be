from typing import List

from boto3.dynamodb.conditions import Attr

from chalicelib.base_class_entity import EntityBase, now_iso
from chalicelib.utils import app as utils_app, data as utils_data
from chalicelib.utils.logger import logger

SORT_BY_ORDER = 'order'
SORT_BY_STATUS = 'status'


def is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class OrderedEntityBase(EntityBase):
    """
    Records shown in a manually arranged sequence with an on/off switch
    (banners, banquet gallery images, testimonials).

    `order` is assigned by the server on creation (max + 1) and later changed
    only by the dashboard swapping the values of two neighbours.
    `is_active` gates public visibility.
    """
    default_is_active = True

    ordering_fields_validation = {
        'order': is_int,
        'is_active': lambda x: isinstance(x, bool),
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)
        self.order: int = utils_data.to_int(kwargs.get('order'))
        is_active = kwargs.get('is_active')
        self.is_active: bool = self.default_is_active if is_active is None else is_active
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or now_iso()

    @classmethod
    def next_order(cls) -> int:
        orders = [record.order for record in cls.query_records() if record.order is not None]
        next_order = max(orders) + 1 if orders else 1
        logger.info(f"next_order ::: {cls.pk=} {next_order=}")
        return next_order

    def _before_create(self) -> None:
        self.order = self.next_order()

    @classmethod
    def list_filter_expression(cls, request):
        if utils_app.is_truthy(utils_app.get_query_param(request, 'active')):
            return Attr('is_active').eq(True)
        return None

    @classmethod
    def sort_records(cls, records: List['OrderedEntityBase'], request) -> List['OrderedEntityBase']:
        sort = utils_app.get_query_param(request, 'sort', SORT_BY_ORDER)
        return sort_ordered(records, active_first=sort == SORT_BY_STATUS)

    def _ordering_dict(self):
        return {
            'order': self.order,
            'is_active': self.is_active,
            'date_created': self.date_created,
            'date_updated': self.date_updated,
        }


def sort_ordered(records: List[OrderedEntityBase], active_first=False) -> List[OrderedEntityBase]:
    """
    Ascending by order, records without order go last.
    With active_first active records go before inactive ones.
    """
    def sort_key(record):
        status_key = (not record.is_active,) if active_first else ()
        return (*status_key, record.order is None, record.order or 0)
    return sorted(records, key=sort_key)
