# companies/urls.py
from django.urls import path
from . import views

app_name = 'companies'

urlpatterns = [
    path('dashboard/', views.dashboard, name='dashboard'),
    path('profile/', views.profile_overview, name='profile'),
    path('details/', views.details, name='details'),

    # settings
    path('settings/', views.settings_index, name='settings'),
    path('settings/profile/', views.settings_profile, name='settings_profile'),
    path('settings/password/', views.settings_password, name='settings_password'),
    path('settings/appearance/', views.settings_appearance, name='settings_appearance'),

    # career page
    path('career-page/', views.career_page, name='career_page'),
    path('career-page/image/', views.career_page_image, name='career_page_image'),
    path('career-page/videos/', views.career_page_video_add, name='career_page_videos'),
    path('career-page/videos/<str:video_id>/', views.career_page_video_remove, name='career_page_video'),
    path('career-page/preview/', views.career_page_preview, name='career_page_preview'),

    # branding images
    path('images/', views.images, name='images'),
    path('images/logo/', views.image, {'image_type': 'logo'}, name='logo'),
    path('images/banner/', views.image, {'image_type': 'banner'}, name='banner'),
]
