from .users.models import User, Profile, ProfileRole
from .auth.models import AuthSession
from .venues.models import Venue
from .concerts.models import Concert, TicketType
from .sales.models import Sale, TicketPurchase
from .ticketing.models import UniqueTicket, CheckIn

__all__ = (
    "User", "Profile", "ProfileRole", "AuthSession", "Venue", "Concert", "TicketType", "Sale", "TicketPurchase",
    "UniqueTicket", "CheckIn"
)
