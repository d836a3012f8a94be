from typing import Tuple, List

from boto3.dynamodb.conditions import Attr

from chalicelib.base_class_entity import EntityBase, now_iso
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import BLOG_POST_STATUSES
from chalicelib.utils import app as utils_app

DEFAULT_IMAGE = '/hero.jpg'
DEFAULT_READ_TIME = '5 min read'


def is_sections_list(value) -> bool:
    return isinstance(value, list) and all(
        isinstance(section, dict)
        and isinstance(section.get('title'), str)
        and isinstance(section.get('descriptions', []), list)
        for section in value
    )


class BlogPost(EntityBase):
    pk = keys_structure.blog_posts_pk
    sk = keys_structure.blog_posts_sk
    record_name = 'Blog post'

    required_mutable_fields_validation = {
        'title': lambda x: isinstance(x, str) and len(x) > 0,
        'author': lambda x: isinstance(x, str) and len(x) > 0,
        'status': lambda x: x in BLOG_POST_STATUSES,
        "date_updated": lambda x: isinstance(x, str),
    }

    optional_fields_validation = {
        'excerpt': lambda x: isinstance(x, str),
        'date': lambda x: isinstance(x, str),
        'category': lambda x: isinstance(x, str),
        'image': lambda x: isinstance(x, str),
        'images': lambda x: isinstance(x, list),
        'read_time': lambda x: isinstance(x, str),
        'content': lambda x: isinstance(x, str),
        'sections': is_sections_list,
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_)

        self.title: str = kwargs.get('title')
        self.excerpt: str = kwargs.get('excerpt', '')
        self.author: str = kwargs.get('author')
        self.date: str = kwargs.get('date')
        self.category: str = kwargs.get('category', '')
        self.status: str = kwargs.get('status') or 'draft'
        self.image: str = kwargs.get('image') or DEFAULT_IMAGE
        self.images: List[str] = kwargs.get('images') or [self.image]
        self.read_time: str = kwargs.get('read_time') or DEFAULT_READ_TIME
        self.content: str = kwargs.get('content', '')
        self.sections: list = kwargs.get('sections', [])
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or now_iso()
        self.record_type = 'blog_post'

    @classmethod
    def list_filter_expression(cls, request):
        status = utils_app.get_query_param(request, 'status')
        return Attr('status').eq(status) if status else None

    @classmethod
    def sort_records(cls, records, request):
        return sorted(records, key=lambda record: record.date_created, reverse=True)

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(post_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'title': self.title,
            'excerpt': self.excerpt,
            'author': self.author,
            'date': self.date,
            'category': self.category,
            'status': self.status,
            'image': self.image,
            'images': self.images,
            'read_time': self.read_time,
            'content': self.content,
            'sections': self.sections,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }
