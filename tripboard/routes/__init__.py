# tripboard/routes/__init__.py
from fastapi import APIRouter
from tripboard.routes.auth import auth
from tripboard.routes.trip import (
    trip_routes, trip_member, invitation, public_routes, category_routes, todo_routes
)
from tripboard.routes.itineraries import day_routes, activity_routes
from tripboard.routes.social import comment_routes, checkin_routes, review_routes
from tripboard.routes.places import place_routes


api_router = APIRouter()

# Auth routes
api_router.include_router(auth.router)

# Trip routes
api_router.include_router(trip_routes.router)
api_router.include_router(trip_member.router)
api_router.include_router(invitation.trip_router)
api_router.include_router(invitation.router)
api_router.include_router(category_routes.router)
api_router.include_router(todo_routes.router)
api_router.include_router(public_routes.router)

# Itinerary routes
api_router.include_router(day_routes.router)
api_router.include_router(activity_routes.router)

# Social routes
api_router.include_router(comment_routes.router)
api_router.include_router(checkin_routes.router)
api_router.include_router(review_routes.router)

# Place routes
api_router.include_router(place_routes.router)
