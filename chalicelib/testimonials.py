from typing import Tuple, Dict

from chalice import Response

from chalicelib.constants import keys_structure
from chalicelib.constants.constants import MIN_RATING, MAX_RATING
from chalicelib.constants.status_codes import http201
from chalicelib.ordered_entity import OrderedEntityBase, is_int
from chalicelib.utils import app as utils_app, data as utils_data
from chalicelib.utils.logger import logger

PUBLIC_SUBMISSION_FIELDS = ['name', 'role', 'quote', 'rating', 'image', 'email', 'phone']


def is_rating(value) -> bool:
    return is_int(value) and MIN_RATING <= value <= MAX_RATING


class Testimonial(OrderedEntityBase):
    pk = keys_structure.testimonials_pk
    sk = keys_structure.testimonials_sk
    record_name = 'Testimonial'

    required_mutable_fields_validation = {
        'name': lambda x: isinstance(x, str) and len(x) > 0,
        'quote': lambda x: isinstance(x, str) and len(x) > 0,
        'rating': is_rating,
        'date_updated': lambda x: isinstance(x, str),
        **OrderedEntityBase.ordering_fields_validation
    }

    optional_fields_validation = {
        'role': lambda x: isinstance(x, str),
        'image': lambda x: isinstance(x, str),
        'email': lambda x: isinstance(x, str),
        'phone': lambda x: isinstance(x, str),
    }

    def __init__(self, id_, **kwargs):
        OrderedEntityBase.__init__(self, id_, **kwargs)

        rating = kwargs.get('rating')
        self.name: str = kwargs.get('name')
        self.role: str = kwargs.get('role', '')
        self.quote: str = kwargs.get('quote')
        self.rating: int = MAX_RATING if rating is None else utils_data.to_int(rating)
        self.image: str = kwargs.get('image', '')
        self.email: str = kwargs.get('email')
        self.phone: str = kwargs.get('phone')
        self.record_type = 'testimonial'

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_submit(cls, request) -> Response:
        """
        Public testimonial form, submitted testimonials wait for moderation
        """
        request_body: Dict = utils_data.parse_raw_body(request)
        public_body = {key: value for key, value in request_body.items() if key in PUBLIC_SUBMISSION_FIELDS}
        logger.info(f"endpoint_submit ::: ignored fields={sorted(set(request_body) - set(public_body))}")
        entity = cls.init_request_create(request, special_body={**public_body, 'is_active': False})
        entity._create_db_record()
        return Response(status_code=http201, body={
            **entity.to_ui(),
            'message': 'Thank you! Your testimonial will be published after review',
            'id': entity.id_
        })

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(testimonial_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name': self.name,
            'role': self.role,
            'quote': self.quote,
            'rating': self.rating,
            'image': self.image,
            'email': self.email,
            'phone': self.phone,
            **self._ordering_dict()
        }
