"""URL configuration for catalog app."""

from django.urls import path

from server.apps.catalog import views

app_name = 'catalog'

urlpatterns = [
    path('', views.catalog, name='catalog'),
    path('upload', views.upload, name='upload'),
    path('uploads', views.upload_page, name='upload_page'),
    path('files', views.files, name='files'),
    path('download', views.download, name='download'),
    path('preview', views.preview, name='preview'),
]
