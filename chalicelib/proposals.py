from typing import Tuple

from chalicelib.base_class_entity import EntityBase, now_iso
from chalicelib.bookings import sort_newest_first
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import PROPOSAL_STATUSES, YES_NO


class Proposal(EntityBase):
    """
    Banquet event enquiry, the hotel answers it with a quote
    """
    pk = keys_structure.proposals_pk
    sk = keys_structure.proposals_sk
    record_name = 'Proposal'

    required_mutable_fields_validation = {
        'first_name': lambda x: isinstance(x, str) and len(x) > 0,
        'last_name': lambda x: isinstance(x, str) and len(x) > 0,
        'mobile_number': lambda x: isinstance(x, str) and len(x) > 0,
        'event_type': lambda x: isinstance(x, str) and len(x) > 0,
        'food_preference': lambda x: isinstance(x, str) and len(x) > 0,
        'alcohol_required': lambda x: x in YES_NO,
        'rooms_required': lambda x: x in YES_NO,
        'status': lambda x: x in PROPOSAL_STATUSES,
        "date_updated": lambda x: isinstance(x, str),
    }

    optional_fields_validation = {
        'alternate_contact_number': lambda x: isinstance(x, str),
        'event_type_other': lambda x: isinstance(x, str),
        'event_date': lambda x: isinstance(x, str),
        'event_timing': lambda x: isinstance(x, str),
        'food_preference_other': lambda x: isinstance(x, str),
        'expected_guests': lambda x: isinstance(x, str),
        'number_of_rooms': lambda x: isinstance(x, str),
        'additional_requirements': lambda x: isinstance(x, str),
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)

        self.first_name: str = kwargs.get('first_name')
        self.last_name: str = kwargs.get('last_name')
        self.mobile_number: str = kwargs.get('mobile_number')
        self.alternate_contact_number: str = kwargs.get('alternate_contact_number')
        self.event_type: str = kwargs.get('event_type')
        self.event_type_other: str = kwargs.get('event_type_other')
        self.event_date: str = kwargs.get('event_date')
        self.event_timing: str = kwargs.get('event_timing')
        self.food_preference: str = kwargs.get('food_preference')
        self.food_preference_other: str = kwargs.get('food_preference_other')
        self.alcohol_required: str = kwargs.get('alcohol_required') or 'No'
        self.expected_guests: str = kwargs.get('expected_guests')
        self.rooms_required: str = kwargs.get('rooms_required') or 'No'
        self.number_of_rooms: str = kwargs.get('number_of_rooms')
        self.additional_requirements: str = kwargs.get('additional_requirements')
        self.status: str = kwargs.get('status') or 'pending'
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or now_iso()
        self.record_type = 'proposal'

    def _before_create(self) -> None:
        self.status = 'pending'

    @classmethod
    def sort_records(cls, records, request):
        return sort_newest_first(records)

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(proposal_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'mobile_number': self.mobile_number,
            'alternate_contact_number': self.alternate_contact_number,
            'event_type': self.event_type,
            'event_type_other': self.event_type_other,
            'event_date': self.event_date,
            'event_timing': self.event_timing,
            'food_preference': self.food_preference,
            'food_preference_other': self.food_preference_other,
            'alcohol_required': self.alcohol_required,
            'expected_guests': self.expected_guests,
            'rooms_required': self.rooms_required,
            'number_of_rooms': self.number_of_rooms,
            'additional_requirements': self.additional_requirements,
            'status': self.status,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }
