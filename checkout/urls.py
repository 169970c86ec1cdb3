from django.urls import path

from . import views

app_name = "checkout"

urlpatterns = [
    path("", views.LandingView.as_view(), name="landing"),
    path("api/gerar-pix/", views.GeneratePixView.as_view(), name="generate-pix"),
]
