from .user.user import User
from .trips.trip_model import Trip
from .trips.trip_member import TripMember, MemberRole, ROLE_RANK
from .trips.trip_invite import TripInvite, InviteStatus
from .trips.category import Category
from .trips.todo import Todo
from .itinerary.day_model import Day
from .itinerary.activity import Activity
from .itinerary.comment import Comment
from .places.place import Place
from .places.check_in import CheckIn
from .places.review import Review
