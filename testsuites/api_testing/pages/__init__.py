"""
API page objects: one class per resource group, one method per endpoint.
"""

from .auth_page import AuthPage
from .base_page import BasePage
from .documents_page import DocumentsPage
from .emergency_contacts_page import EmergencyContactsPage
from .event_page import EventPage
from .invite_users_page import InviteUsersPage
from .misc_page import MiscPage
from .reports_page import ReportsPage
from .unauthorized_page import UnauthorizedPage
from .user_page import UserPage
from .user_places_page import UserPlacesPage

__all__ = [
    "AuthPage",
    "BasePage",
    "DocumentsPage",
    "EmergencyContactsPage",
    "EventPage",
    "InviteUsersPage",
    "MiscPage",
    "ReportsPage",
    "UnauthorizedPage",
    "UserPage",
    "UserPlacesPage",
]
