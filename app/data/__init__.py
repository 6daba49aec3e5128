from fastapi import Request
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.data.menu_items import MenuItemsResource
from app.data.opening_hours import OpeningHoursResource, group_by_day
from app.data.profile import ProfileResource
from app.data.promo_banners import PromoBannersResource
from app.data.restaurant_info import RestaurantInfoResource
from app.data.screenshots import ScreenshotsResource
from app.services.query_cache import QueryCache
from app.services.realtime import ChangeFeed, change_feed


class DataLayer:
    """Every data resource, sharing one session factory, cache and feed."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        cache: QueryCache = None,
        feed: ChangeFeed = None,
    ):
        self.session_factory = session_factory
        self.cache = cache or QueryCache()
        self.feed = feed or change_feed

        self.menu_items = MenuItemsResource(session_factory, self.cache, self.feed)
        self.opening_hours = OpeningHoursResource(session_factory, self.cache, self.feed)
        self.restaurant_info = RestaurantInfoResource(session_factory, self.cache, self.feed)
        self.promo_banners = PromoBannersResource(session_factory, self.cache, self.feed)
        self.profile = ProfileResource(session_factory, self.cache)
        self.screenshots = ScreenshotsResource(self.cache)

    def watchable(self, name: str):
        """Resource behind a realtime channel name like 'menu-items'."""
        return {
            "menu-items": self.menu_items,
            "opening-hours": self.opening_hours,
            "restaurant-info": self.restaurant_info,
            "promo-banners": self.promo_banners,
        }.get(name)


def get_data(request: Request) -> DataLayer:
    return request.app.state.data
