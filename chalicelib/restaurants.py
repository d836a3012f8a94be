from typing import Tuple, Dict, List, Set

from boto3.dynamodb.conditions import Attr
from chalice import Response

from chalicelib.base_class_entity import EntityBase, now_iso
from chalicelib.constants import keys_structure
from chalicelib.legacy_fields import RESTAURANT_LEGACY_FIELDS, migrate_legacy_fields, migrated_fields
from chalicelib.ordered_entity import is_int
from chalicelib.utils import app as utils_app, data as utils_data, db as utils_db, exceptions
from chalicelib.utils.logger import logger


def is_menu(value) -> bool:
    """
    {category: [{name, price, description}, ...], ...}
    """
    return isinstance(value, dict) and all(
        isinstance(items, list) and all(isinstance(item, dict) and isinstance(item.get('name'), str)
                                        for item in items)
        for items in value.values()
    )


class Restaurant(EntityBase):
    pk = keys_structure.restaurants_pk
    sk = keys_structure.restaurants_sk
    record_name = 'Restaurant'

    required_mutable_fields_validation = {
        'name': lambda x: isinstance(x, str) and len(x) > 0,
        'slug': lambda x: isinstance(x, str) and len(x) > 0,
        'highlights': lambda x: isinstance(x, list),
        'menu': is_menu,
        'schema_version': is_int,
        "date_updated": lambda x: isinstance(x, str),
    }

    optional_fields_validation = {
        'cuisine': lambda x: isinstance(x, str),
        'image': lambda x: isinstance(x, str),
        'description': lambda x: isinstance(x, str),
        'about': lambda x: isinstance(x, str),
        'opening_hours': lambda x: isinstance(x, str),
        'capacity': lambda x: isinstance(x, str),
        'address': lambda x: isinstance(x, str),
        'location': lambda x: isinstance(x, str),
        'menu_highlights': is_menu,
        'gallery': lambda x: isinstance(x, list),
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)
        kwargs = migrate_legacy_fields(kwargs, RESTAURANT_LEGACY_FIELDS)

        self.name: str = kwargs.get('name')
        self.slug: str = utils_data.slugify(kwargs.get('slug') or self.name) or None
        self.cuisine: str = kwargs.get('cuisine', '')
        self.image: str = kwargs.get('image', '')
        self.description: str = kwargs.get('description', '')
        self.about: str = kwargs.get('about')
        self.opening_hours: str = kwargs.get('opening_hours', '')
        self.capacity: str = kwargs.get('capacity', '')
        self.address: str = kwargs.get('address', '')
        self.location: str = kwargs.get('location')
        self.highlights: List[str] = kwargs.get('highlights', [])
        self.menu: Dict[str, list] = kwargs.get('menu', {})
        self.menu_highlights: Dict[str, list] = kwargs.get('menu_highlights')
        self.gallery: List[str] = kwargs.get('gallery', [])
        self.schema_version: int = utils_data.to_int(kwargs['schema_version'])
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or now_iso()
        self.record_type = 'restaurant'

    @classmethod
    def query_by_slug(cls, slug) -> List['Restaurant']:
        return cls.query_records(Attr('slug').eq(slug))

    @classmethod
    def resolve_id(cls, identifier: str) -> str:
        """
        Restaurants are addressed either by id or by slug
        """
        try:
            utils_db.get_db_item(cls.pk, cls.sk.format(restaurant_id=identifier))
            return identifier
        except exceptions.RecordNotFound:
            restaurants = cls.query_by_slug(identifier)
            if not restaurants:
                raise exceptions.RecordNotFound(f'Restaurant with identifier {identifier} not found')
            logger.info(f"resolve_id ::: slug={identifier} resolved to id={restaurants[0].id_}")
            return restaurants[0].id_

    def _before_create(self) -> None:
        if self.slug and self.query_by_slug(self.slug):
            raise exceptions.ValidationException(f'Restaurant with slug={self.slug} already exists')

    @classmethod
    @utils_app.request_exception_handler
    def endpoint_get_by_identifier(cls, identifier) -> Response:
        return cls.endpoint_get_by_id(cls.resolve_id(identifier))

    @classmethod
    @utils_app.request_exception_handler
    def endpoint_update_by_identifier(cls, request, identifier) -> Response:
        return cls.endpoint_update(request, cls.resolve_id(identifier))

    @classmethod
    @utils_app.request_exception_handler
    def endpoint_delete_by_identifier(cls, identifier) -> Response:
        return cls.endpoint_delete(cls.resolve_id(identifier))

    def _fields_to_update(self) -> Set[str]:
        fields = EntityBase._fields_to_update(self) | migrated_fields(self.db_record, RESTAURANT_LEGACY_FIELDS)
        if 'slug' in fields:
            conflicts = [restaurant for restaurant in self.query_by_slug(self.slug) if restaurant.id_ != self.id_]
            if conflicts:
                raise exceptions.ValidationException(f'Restaurant with slug={self.slug} already exists')
        return fields

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(restaurant_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name': self.name,
            'slug': self.slug,
            'cuisine': self.cuisine,
            'image': self.image,
            'description': self.description,
            'about': self.about,
            'opening_hours': self.opening_hours,
            'capacity': self.capacity,
            'address': self.address,
            'location': self.location,
            'highlights': self.highlights,
            'menu': self.menu,
            'menu_highlights': self.menu_highlights,
            'gallery': self.gallery,
            'schema_version': self.schema_version,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }
