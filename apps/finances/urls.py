"""URL routing for payments."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import PaymentViewSet, YocoWebhookView

router = DefaultRouter()
router.register(r"", PaymentViewSet, basename="payment")

urlpatterns = [
    path("yoco/webhook/", YocoWebhookView.as_view(), name="yoco-webhook"),
    path("", include(router.urls)),
]
