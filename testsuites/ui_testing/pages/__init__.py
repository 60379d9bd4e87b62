"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for application pages.

Each page class encapsulates:
    - Element locators (ordered LocatorSets)
    - Page-specific steps and journeys
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .edit_profile_page import EditProfilePage
from .home_page import HomePage
from .login_page import LoginPage
from .logout_page import LogoutPage
from .pin_page import PinPage
from .search_page import SearchPage
from .signup_page import SignupPage

__all__ = [
    "EditProfilePage",
    "HomePage",
    "LoginPage",
    "LogoutPage",
    "PinPage",
    "SearchPage",
    "SignupPage",
]
