from decimal import Decimal
from typing import Tuple

from chalicelib.base_class_entity import EntityBase, now_iso
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import BOOKING_STATUSES
from chalicelib.ordered_entity import is_int
from chalicelib.utils import data as utils_data


def sort_newest_first(records):
    return sorted(records, key=lambda record: record.date_created, reverse=True)


class Booking(EntityBase):
    """
    Room booking request from the public room page.
    The room is referenced by id only, no integrity checks.
    """
    pk = keys_structure.bookings_pk
    sk = keys_structure.bookings_sk
    record_name = 'Booking'

    required_immutable_fields_validation = {
        **EntityBase.required_immutable_fields_validation,
        'room_id': lambda x: isinstance(x, str) and len(x) > 0,
    }

    required_mutable_fields_validation = {
        'first_name': lambda x: isinstance(x, str) and len(x) > 0,
        'last_name': lambda x: isinstance(x, str) and len(x) > 0,
        'email': lambda x: isinstance(x, str) and '@' in x,
        'mobile_number': lambda x: isinstance(x, str) and len(x) > 0,
        'status': lambda x: x in BOOKING_STATUSES,
        "date_updated": lambda x: isinstance(x, str),
    }

    optional_fields_validation = {
        'room_name': lambda x: isinstance(x, str),
        'title': lambda x: isinstance(x, str),
        'check_in': lambda x: isinstance(x, str),
        'check_out': lambda x: isinstance(x, str),
        'guests': lambda x: isinstance(x, str),
        'nights': is_int,
        'total_amount': lambda x: isinstance(x, Decimal),
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)

        self.room_id: str = kwargs.get('room_id')
        self.room_name: str = kwargs.get('room_name')
        self.title: str = kwargs.get('title')
        self.first_name: str = kwargs.get('first_name')
        self.last_name: str = kwargs.get('last_name')
        self.email: str = kwargs.get('email')
        self.mobile_number: str = kwargs.get('mobile_number')
        self.check_in: str = kwargs.get('check_in')
        self.check_out: str = kwargs.get('check_out')
        self.guests: str = kwargs.get('guests')
        self.nights: int = utils_data.to_int(kwargs.get('nights'))
        self.total_amount: Decimal = utils_data.to_decimal(kwargs.get('total_amount'))
        self.status: str = kwargs.get('status') or 'pending'
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or now_iso()
        self.record_type = 'booking'

    @classmethod
    def sort_records(cls, records, request):
        return sort_newest_first(records)

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(booking_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'room_id': self.room_id,
            'room_name': self.room_name,
            'title': self.title,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'mobile_number': self.mobile_number,
            'check_in': self.check_in,
            'check_out': self.check_out,
            'guests': self.guests,
            'nights': self.nights,
            'total_amount': self.total_amount,
            'status': self.status,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }
