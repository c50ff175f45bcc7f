from django.urls import path
from . import views

app_name = 'jobs'

LISTINGS = 'company/job-listings/'

urlpatterns = [
    # company job listings
    path(LISTINGS, views.listing_index, name='listings'),                                   # GET index, POST store
    path(LISTINGS + 'create/', views.listing_create, name='create'),
    path(LISTINGS + 'subscription/', views.listing_store_with_subscription, name='store_with_subscription'),
    path(LISTINGS + '<int:pk>/', views.listing_detail, name='listing'),                     # GET, PUT/PATCH, DELETE
    path(LISTINGS + '<int:pk>/edit/', views.listing_edit, name='edit'),
    path(LISTINGS + '<int:pk>/subscription/', views.listing_update_with_subscription, name='update_with_subscription'),
    path(LISTINGS + '<int:pk>/screening/', views.listing_screening, name='screening'),
    path(LISTINGS + '<int:pk>/preview/', views.listing_preview, name='preview'),

    # packages / publishing
    path(LISTINGS + '<int:pk>/package-selection/', views.package_selection, name='package_selection'),
    path(LISTINGS + '<int:pk>/order-summary/', views.order_summary, name='order_summary'),
    path(LISTINGS + '<int:pk>/already-published/', views.already_published, name='already_published'),
    path(LISTINGS + '<int:pk>/publish/', views.publish, name='publish'),
    path(LISTINGS + '<int:pk>/success/', views.publish_success, name='success'),

    # listing images (JSON)
    path(LISTINGS + '<int:pk>/images/', views.listing_images, name='images'),
    path(LISTINGS + '<int:pk>/images/logo/', views.listing_image, {'image_type': 'logo'}, name='logo'),
    path(LISTINGS + '<int:pk>/images/banner/', views.listing_image, {'image_type': 'banner'}, name='banner'),
    path(LISTINGS + '<int:pk>/images/toggle/', views.listing_image_toggle, name='image_toggle'),

    # public / applicants
    path('jobs/<int:pk>/', views.job_detail, name='detail'),
    path('jobs/<int:pk>/apply/', views.apply, name='apply'),
    path('applicant/dashboard/', views.applicant_dashboard, name='applicant_dashboard'),
]
