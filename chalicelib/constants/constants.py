MB = 1024 * 1024

# Upload endpoint ceiling, applies to every folder
UPLOAD_MAX_SIZE = 10 * MB

UPLOAD_ROOT_FOLDER = 'myriad-hotel'
DEFAULT_UPLOAD_FOLDER = f'{UPLOAD_ROOT_FOLDER}/restaurants'

UPLOAD_FOLDERS = {
    'banners': f'{UPLOAD_ROOT_FOLDER}/banners',
    'banquet_gallery': f'{UPLOAD_ROOT_FOLDER}/banquet-gallery',
    'testimonials': f'{UPLOAD_ROOT_FOLDER}/testimonials',
    'blog': f'{UPLOAD_ROOT_FOLDER}/blog',
    'rooms': f'{UPLOAD_ROOT_FOLDER}/rooms',
    'restaurants': f'{UPLOAD_ROOT_FOLDER}/restaurants',
}

# Dashboard-side ceilings per asset folder. Banquet gallery has always been stricter.
UPLOAD_SIZE_LIMITS = {
    UPLOAD_FOLDERS['banquet_gallery']: 5 * MB,
    UPLOAD_FOLDERS['blog']: 10 * MB,
}

IMAGE_FORMAT_EXTENSIONS = {
    'JPEG': 'jpg',
    'PNG': 'png',
    'GIF': 'gif',
    'WEBP': 'webp',
}

BOOKING_STATUSES = ['pending', 'active', 'confirmed', 'cancelled']
PROPOSAL_STATUSES = ['pending', 'contacted', 'quoted', 'confirmed', 'declined']
BLOG_POST_STATUSES = ['draft', 'published']
YES_NO = ['Yes', 'No']

MIN_RATING = 1
MAX_RATING = 5

CURRENT_SCHEMA_VERSION = 2
