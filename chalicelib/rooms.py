from decimal import Decimal
from typing import Tuple, List, Set

from chalicelib.base_class_entity import EntityBase, now_iso
from chalicelib.constants import keys_structure
from chalicelib.legacy_fields import ROOM_LEGACY_FIELDS, migrate_legacy_fields, migrated_fields
from chalicelib.ordered_entity import is_int
from chalicelib.utils import data as utils_data


def is_str_list(value) -> bool:
    return isinstance(value, list) and all(isinstance(x, str) for x in value)


class Room(EntityBase):
    pk = keys_structure.rooms_pk
    sk = keys_structure.rooms_sk
    record_name = 'Room'

    required_mutable_fields_validation = {
        'title': lambda x: isinstance(x, str) and len(x) > 0,
        'amenities': is_str_list,
        'schema_version': is_int,
        "date_updated": lambda x: isinstance(x, str),
    }

    optional_fields_validation = {
        'check_in': lambda x: isinstance(x, str),
        'check_out': lambda x: isinstance(x, str),
        'guests': lambda x: isinstance(x, str),
        'room': lambda x: isinstance(x, str),
        'gallery': is_str_list,
        'about': lambda x: isinstance(x, str),
        'price_summary': lambda x: isinstance(x, dict),
        'addons': lambda x: isinstance(x, list),
        'offers': lambda x: isinstance(x, list),
        'old_price': lambda x: isinstance(x, Decimal),
        'capacity': lambda x: isinstance(x, str),
        'size': lambda x: isinstance(x, str),
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)
        kwargs = migrate_legacy_fields(kwargs, ROOM_LEGACY_FIELDS)

        self.title: str = kwargs.get('title')
        self.check_in: str = kwargs.get('check_in')
        self.check_out: str = kwargs.get('check_out')
        self.guests: str = kwargs.get('guests')
        self.room: str = kwargs.get('room')
        self.gallery: List[str] = kwargs.get('gallery', [])
        self.about: str = kwargs.get('about', '')
        self.amenities: List[str] = kwargs.get('amenities', [])
        self.price_summary: dict = kwargs.get('price_summary', {})
        self.addons: list = kwargs.get('addons', [])
        self.offers: list = kwargs.get('offers', [])
        self.old_price = utils_data.to_decimal(kwargs.get('old_price'))
        self.capacity: str = kwargs.get('capacity')
        self.size: str = kwargs.get('size')
        self.schema_version: int = utils_data.to_int(kwargs['schema_version'])
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or now_iso()
        self.record_type = 'room'

    def _fields_to_update(self) -> Set[str]:
        return EntityBase._fields_to_update(self) | migrated_fields(self.db_record, ROOM_LEGACY_FIELDS)

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(room_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'title': self.title,
            'check_in': self.check_in,
            'check_out': self.check_out,
            'guests': self.guests,
            'room': self.room,
            'gallery': self.gallery,
            'about': self.about,
            'amenities': self.amenities,
            'price_summary': self.price_summary,
            'addons': self.addons,
            'offers': self.offers,
            'old_price': self.old_price,
            'capacity': self.capacity,
            'size': self.size,
            'schema_version': self.schema_version,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }
