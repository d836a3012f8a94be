from typing import Callable, NamedTuple, Optional

from chalicelib.constants.constants import UPLOAD_FOLDERS
from dashboard.forms import BannerForm, GalleryImageForm, TestimonialForm
from dashboard.notifications import Notifier
from dashboard.ordered_list import OrderedContentListController, SORT_BY_ORDER, SORT_BY_STATUS
from dashboard.uploads import UploadProxyHelper


class Screen(NamedTuple):
    """
    Dashboard page for one orderable collection, list controller and its uploader share the notifier
    """
    controller: OrderedContentListController
    uploads: UploadProxyHelper
    notifier: Notifier


def _screen(api, form_class, folder, sort, confirm, notifier) -> Screen:
    notifier = notifier or Notifier()
    controller = OrderedContentListController(api, form_class, notifier=notifier, confirm=confirm, sort=sort)
    return Screen(controller, UploadProxyHelper(api, folder, notifier=notifier), notifier)


def banners_screen(api, confirm: Optional[Callable] = None, notifier: Optional[Notifier] = None) -> Screen:
    return _screen(api, BannerForm, UPLOAD_FOLDERS['banners'], SORT_BY_ORDER, confirm, notifier)


def banquet_gallery_screen(api, confirm=None, notifier=None) -> Screen:
    return _screen(api, GalleryImageForm, UPLOAD_FOLDERS['banquet_gallery'], SORT_BY_ORDER, confirm, notifier)


def testimonials_screen(api, confirm=None, notifier=None) -> Screen:
    # pending testimonials from the public form sink below the published ones
    return _screen(api, TestimonialForm, UPLOAD_FOLDERS['testimonials'], SORT_BY_STATUS, confirm, notifier)
