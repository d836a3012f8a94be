from typing import Tuple

from chalicelib.constants import keys_structure
from chalicelib.ordered_entity import OrderedEntityBase


class BanquetGalleryImage(OrderedEntityBase):
    pk = keys_structure.banquet_gallery_pk
    sk = keys_structure.banquet_gallery_sk
    record_name = 'Gallery image'

    required_mutable_fields_validation = {
        'image': lambda x: isinstance(x, str) and len(x) > 0,
        'date_updated': lambda x: isinstance(x, str),
        **OrderedEntityBase.ordering_fields_validation
    }

    optional_fields_validation = {
        'title': lambda x: isinstance(x, str),
        'description': lambda x: isinstance(x, str),
    }

    def __init__(self, id_, **kwargs):
        OrderedEntityBase.__init__(self, id_, **kwargs)

        self.image: str = kwargs.get('image')
        self.title: str = kwargs.get('title', '')
        self.description: str = kwargs.get('description', '')
        self.record_type = 'banquet_gallery_image'

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(image_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'image': self.image,
            'title': self.title,
            'description': self.description,
            **self._ordering_dict()
        }
