from typing import Tuple

from chalicelib.base_class_entity import EntityBase, now_iso
from chalicelib.bookings import sort_newest_first
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import BOOKING_STATUSES


class RestaurantBooking(EntityBase):
    pk = keys_structure.restaurant_bookings_pk
    sk = keys_structure.restaurant_bookings_sk
    record_name = 'Restaurant booking'

    required_immutable_fields_validation = {
        **EntityBase.required_immutable_fields_validation,
        'restaurant_id': lambda x: isinstance(x, str) and len(x) > 0,
    }

    required_mutable_fields_validation = {
        'name': lambda x: isinstance(x, str) and len(x) > 0,
        'phone': lambda x: isinstance(x, str) and len(x) > 0,
        'date': lambda x: isinstance(x, str) and len(x) > 0,
        'time': lambda x: isinstance(x, str) and len(x) > 0,
        'status': lambda x: x in BOOKING_STATUSES,
        "date_updated": lambda x: isinstance(x, str),
    }

    optional_fields_validation = {
        'restaurant_name': lambda x: isinstance(x, str),
        'restaurant_slug': lambda x: isinstance(x, str),
        'email': lambda x: isinstance(x, str),
        'guests': lambda x: isinstance(x, str),
        'special_requests': lambda x: isinstance(x, str),
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)

        self.restaurant_id: str = kwargs.get('restaurant_id')
        self.restaurant_name: str = kwargs.get('restaurant_name')
        self.restaurant_slug: str = kwargs.get('restaurant_slug')
        self.name: str = kwargs.get('name')
        self.email: str = kwargs.get('email')
        self.phone: str = kwargs.get('phone')
        self.date: str = kwargs.get('date')
        self.time: str = kwargs.get('time')
        self.guests: str = kwargs.get('guests')
        self.special_requests: str = kwargs.get('special_requests')
        self.status: str = kwargs.get('status') or 'pending'
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or now_iso()
        self.record_type = 'restaurant_booking'

    def _before_create(self) -> None:
        # new table requests start as pending until the staff confirms them
        self.status = 'pending'

    @classmethod
    def sort_records(cls, records, request):
        return sort_newest_first(records)

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(booking_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'restaurant_id': self.restaurant_id,
            'restaurant_name': self.restaurant_name,
            'restaurant_slug': self.restaurant_slug,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'date': self.date,
            'time': self.time,
            'guests': self.guests,
            'special_requests': self.special_requests,
            'status': self.status,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }
