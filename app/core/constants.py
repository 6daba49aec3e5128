import enum


class MenuCategory(str, enum.Enum):
    snacks = "snacks"
    drinks = "drinks"
    specials = "specials"
    desserts = "desserts"


class PromoActionType(str, enum.Enum):
    whatsapp = "whatsapp"
    email = "email"
    link = "link"
    scroll = "scroll"
    phone = "phone"
    download = "download"


# day_of_week 0..6, Monday first
DAY_NAMES = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

# 📁 Object keys / CDN folders for every upload target
UPLOAD_PATHS = {
    "menu_items": "menu-items",
    "restaurant_info": "restaurant-info",
    "avatars": "avatars",
    "screenshots": "screenshots",
}

SCREENSHOT_LIST_LIMIT = 100
