"""URL routing for page content."""

from django.urls import path  # type: ignore

from .views import PageChangesView, PageContentView

urlpatterns = [
    path("<slug:page>/", PageContentView.as_view(), name="page-content"),
    path("<slug:page>/changes/", PageChangesView.as_view(), name="page-content-changes"),
]
