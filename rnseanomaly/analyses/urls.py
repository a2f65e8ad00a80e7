from django.urls import path
from . import views

urlpatterns = [
    path('api/upload', views.UploadView.as_view(), name='upload'),
    path('api/results', views.ResultListView.as_view(), name='result_list'),
    path('api/results/<str:result_id>/download', views.ResultDownloadView.as_view(), name='result_download'),
    path('api/results/<str:result_id>/rescore', views.ResultRescoreView.as_view(), name='result_rescore'),
]
