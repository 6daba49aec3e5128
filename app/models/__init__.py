from .base import Base
from .user import User
from .tenant import Tenant
from .profile import Profile
from .menu.menu_item import MenuItem
from .opening_hour import OpeningHour
from .restaurant_info import RestaurantInfo
from .promo_banner import PromoBanner
