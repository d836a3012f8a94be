from copy import deepcopy
from typing import Dict, List, Optional

from chalicelib.constants.constants import MAX_RATING, MIN_RATING


def is_filled(value) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0


class EntityForm:
    """
    Dashboard form state for one record.
    `record_id` is None for a new record and the record id when editing.
    """
    collection = None
    record_name = 'Record'

    required_fields_validation = {}
    # field -> default value of an empty form
    optional_fields_defaults = {
        'is_active': True,
    }
    list_fields = ()

    def __init__(self, record_id: Optional[str] = None, **fields):
        self.record_id = record_id
        self.fields: Dict = {
            **{key: None for key in self.required_fields_validation},
            **deepcopy(self.optional_fields_defaults),
        }
        for key, value in fields.items():
            if key in self.fields:
                self.fields[key] = value

    @classmethod
    def from_record(cls, record: Dict) -> 'EntityForm':
        return cls(record_id=record.get('id'), **record)

    @property
    def is_new(self) -> bool:
        return self.record_id is None

    def get(self, field, default=None):
        return self.fields.get(field, default)

    def set(self, field, value) -> None:
        if field not in self.fields:
            raise KeyError(f'{self.__class__.__name__} has no field {field}')
        self.fields[field] = value

    def attach_url(self, field, url) -> None:
        """
        List fields get the url appended, plain fields are replaced
        """
        if field in self.list_fields:
            self.set(field, [*(self.fields.get(field) or []), url])
        else:
            self.set(field, url)

    def validate(self) -> List[str]:
        """
        :return:
        names of the required fields that are missing, empty list when the form can be submitted
        """
        return [key for key, validator_func in self.required_fields_validation.items()
                if validator_func(self.fields.get(key)) is False]

    def missing_fields_message(self, missing_fields: List[str]) -> str:
        return f'Please fill in the required fields: {", ".join(missing_fields)}'

    def to_payload(self) -> Dict:
        return {key: value for key, value in self.fields.items() if value is not None}


class BannerForm(EntityForm):
    collection = 'banners'
    record_name = 'Banner'

    required_fields_validation = {
        'title': is_filled,
        'images': lambda x: isinstance(x, list) and any(is_filled(image) for image in x),
    }
    optional_fields_defaults = {
        'subtitle': '',
        'link': '',
        'button_text': 'Learn More',
        'page': 'home',
        'is_active': True,
    }
    list_fields = ('images',)

    def __init__(self, record_id=None, **fields):
        # records and older forms may only carry the single `image`
        if not fields.get('images') and fields.get('image'):
            fields['images'] = [fields['image']]
        fields.pop('image', None)
        EntityForm.__init__(self, record_id, **fields)

    def missing_fields_message(self, missing_fields):
        if 'images' in missing_fields:
            return 'Title and at least one image are required'
        return EntityForm.missing_fields_message(self, missing_fields)

    def to_payload(self):
        payload = EntityForm.to_payload(self)
        images = [image for image in payload.get('images') or [] if is_filled(image)]
        payload['images'] = images
        if images:
            payload['image'] = images[0]
        return payload


class GalleryImageForm(EntityForm):
    collection = 'banquet-gallery'
    record_name = 'Gallery image'

    required_fields_validation = {
        'image': is_filled,
    }
    optional_fields_defaults = {
        'title': '',
        'description': '',
        'is_active': True,
    }

    def missing_fields_message(self, missing_fields):
        return 'Please upload an image'


def is_rating(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and MIN_RATING <= value <= MAX_RATING


class TestimonialForm(EntityForm):
    collection = 'testimonials'
    record_name = 'Testimonial'

    required_fields_validation = {
        'name': is_filled,
        'quote': is_filled,
        'rating': is_rating,
    }
    optional_fields_defaults = {
        'role': '',
        'rating': MAX_RATING,
        'image': '',
        'email': '',
        'phone': '',
        'is_active': True,
    }

    def missing_fields_message(self, missing_fields):
        if missing_fields == ['rating']:
            return f'Rating must be between {MIN_RATING} and {MAX_RATING}'
        return 'Name and quote are required'
