"""API routes for the tickets app."""

from rest_framework.routers import DefaultRouter

from .views import (
    BuildingViewSet,
    ClientViewSet,
    ElevatorViewSet,
    TechnicianViewSet,
    TicketViewSet,
)

router = DefaultRouter()
router.register(r"clients", ClientViewSet)
router.register(r"buildings", BuildingViewSet)
router.register(r"elevators", ElevatorViewSet)
router.register(r"technicians", TechnicianViewSet)
router.register(r"tickets", TicketViewSet)

urlpatterns = router.urls
