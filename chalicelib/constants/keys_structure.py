banners_pk = 'banners'
banners_sk = '{banner_id}'

banquet_gallery_pk = 'banquet_gallery'
banquet_gallery_sk = '{image_id}'

testimonials_pk = 'testimonials'
testimonials_sk = '{testimonial_id}'

blog_posts_pk = 'blog_posts'
blog_posts_sk = '{post_id}'

rooms_pk = 'rooms'
rooms_sk = '{room_id}'

restaurants_pk = 'restaurants'
restaurants_sk = '{restaurant_id}'

bookings_pk = 'bookings'
bookings_sk = '{booking_id}'

restaurant_bookings_pk = 'restaurant_bookings'
restaurant_bookings_sk = '{booking_id}'

proposals_pk = 'proposals'
proposals_sk = '{proposal_id}'
