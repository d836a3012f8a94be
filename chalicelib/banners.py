from typing import Tuple, Dict, List

from boto3.dynamodb.conditions import Attr

from chalicelib.constants import keys_structure
from chalicelib.ordered_entity import OrderedEntityBase
from chalicelib.utils import app as utils_app

DEFAULT_BUTTON_TEXT = 'Learn More'
DEFAULT_PAGE = 'home'


def is_images_list(value) -> bool:
    return isinstance(value, list) and len(value) > 0 and all(isinstance(x, str) and x for x in value)


class Banner(OrderedEntityBase):
    pk = keys_structure.banners_pk
    sk = keys_structure.banners_sk
    record_name = 'Banner'

    required_mutable_fields_validation = {
        'title': lambda x: isinstance(x, str) and len(x) > 0,
        'image': lambda x: isinstance(x, str) and len(x) > 0,
        'images': is_images_list,
        'page': lambda x: isinstance(x, str),
        'date_updated': lambda x: isinstance(x, str),
        **OrderedEntityBase.ordering_fields_validation
    }

    optional_fields_validation = {
        'subtitle': lambda x: isinstance(x, str),
        'link': lambda x: isinstance(x, str),
        'button_text': lambda x: isinstance(x, str),
    }

    def __init__(self, id_, **kwargs):
        OrderedEntityBase.__init__(self, id_, **kwargs)

        self.title: str = kwargs.get('title')
        self.subtitle: str = kwargs.get('subtitle', '')
        self.image: str = kwargs.get('image')
        self.images: List[str] = kwargs.get('images', [])
        self.link: str = kwargs.get('link', '')
        self.button_text: str = kwargs.get('button_text') or DEFAULT_BUTTON_TEXT
        self.page: str = kwargs.get('page') or DEFAULT_PAGE
        self.record_type = 'banner'

    @classmethod
    def prepare_request_body(cls, request_body: Dict) -> Dict:
        """
        `image` is always the first element of `images`
        """
        images = request_body.get('images')
        if isinstance(images, list) and images:
            request_body['image'] = images[0]
        elif request_body.get('image') and not images:
            request_body['images'] = [request_body['image']]
        return request_body

    @classmethod
    def list_filter_expression(cls, request):
        filter_expression = super().list_filter_expression(request)
        page = utils_app.get_query_param(request, 'page')
        if page:
            # banners created before pages were introduced belong to the home page
            page_filter = Attr('page').eq(page)
            if page == DEFAULT_PAGE:
                page_filter = page_filter | Attr('page').not_exists()
            filter_expression = page_filter if filter_expression is None else filter_expression & page_filter
        return filter_expression

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(banner_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'title': self.title,
            'subtitle': self.subtitle,
            'image': self.image,
            'images': self.images,
            'link': self.link,
            'button_text': self.button_text,
            'page': self.page,
            **self._ordering_dict()
        }
