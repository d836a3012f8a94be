import os

from chalice import Chalice, Response

from chalicelib import banners, banquet_gallery, testimonials, blog, rooms, restaurants, bookings, \
    restaurant_bookings, proposals, uploads
from chalicelib.constants.status_codes import http200
from chalicelib.utils.logger import bind_request_id, log_request

app = Chalice(app_name='hotel-website')

app.api.binary_types.insert(0, 'multipart/form-data')
app.debug = os.environ.get('DEBUG', 'false').lower() == 'true'

# url segment -> entity class, every collection gets the same CRUD routes
CRUD_COLLECTIONS = {
    'banners': banners.Banner,
    'banquet-gallery': banquet_gallery.BanquetGalleryImage,
    'testimonials': testimonials.Testimonial,
    'blog': blog.BlogPost,
    'rooms': rooms.Room,
    'bookings': bookings.Booking,
    'restaurant-bookings': restaurant_bookings.RestaurantBooking,
    'proposals': proposals.Proposal,
}


@app.middleware('http')
def request_logging_middleware(event, get_response):
    bind_request_id(event)
    log_request(event)
    return get_response(event)


@app.route('/health-check', methods=['GET'], cors=True)
def health_check():
    return Response(status_code=http200, body={'health': 'check'})


def register_crud_routes(url_segment, entity_class):
    def get_all():
        return entity_class.endpoint_get_all(app.current_request)

    def create():
        return entity_class.endpoint_create(app.current_request)

    def get_by_id(record_id):
        return entity_class.endpoint_get_by_id(record_id)

    def update(record_id):
        return entity_class.endpoint_update(app.current_request, record_id)

    def delete(record_id):
        return entity_class.endpoint_delete(record_id)

    name = url_segment.replace('-', '_')
    for view, view_name in ((get_all, 'get_all'), (create, 'create'), (get_by_id, 'get_by_id'),
                            (update, 'update'), (delete, 'delete')):
        view.__name__ = f'{view_name}_{name}'

    app.route(f'/{url_segment}', methods=['GET'], cors=True)(get_all)
    app.route(f'/{url_segment}', methods=['POST'], cors=True)(create)
    app.route(f'/{url_segment}/{{record_id}}', methods=['GET'], cors=True)(get_by_id)
    app.route(f'/{url_segment}/{{record_id}}', methods=['PUT'], cors=True)(update)
    app.route(f'/{url_segment}/{{record_id}}', methods=['DELETE'], cors=True)(delete)


# TESTIMONIALS (public form), registered before /testimonials/{record_id}
@app.route('/testimonials/submit', methods=['POST'], cors=True)
def submit_testimonial():
    """
    guests leave a testimonial, it stays inactive until approved in the dashboard
    """
    return testimonials.Testimonial.endpoint_submit(app.current_request)


for collection_url, collection_entity in CRUD_COLLECTIONS.items():
    register_crud_routes(collection_url, collection_entity)


# RESTAURANTS
@app.route('/restaurants', methods=['GET'], cors=True)
def get_restaurants():
    return restaurants.Restaurant.endpoint_get_all(app.current_request)


@app.route('/restaurants', methods=['POST'], cors=True)
def create_restaurant():
    return restaurants.Restaurant.endpoint_create(app.current_request)


@app.route('/restaurants/{identifier}', methods=['GET'], cors=True)
def get_restaurant(identifier):
    """
    identifier is either restaurant id or slug
    """
    return restaurants.Restaurant.endpoint_get_by_identifier(identifier)


@app.route('/restaurants/{identifier}', methods=['PUT'], cors=True)
def update_restaurant(identifier):
    return restaurants.Restaurant.endpoint_update_by_identifier(app.current_request, identifier)


@app.route('/restaurants/{identifier}', methods=['DELETE'], cors=True)
def delete_restaurant(identifier):
    return restaurants.Restaurant.endpoint_delete_by_identifier(identifier)


# IMAGES
@app.route('/upload', methods=['POST'], content_types=['multipart/form-data'], cors=True)
def image_upload():
    """
    multipart form with a `file` part, ?folder= defines where the image is stored
    """
    return uploads.image_upload(app.current_request)
