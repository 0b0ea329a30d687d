"""Page controllers: all flats, favorites and the new-flat form."""

from rentease.views.favorites import FavoritesView
from rentease.views.flats import FlatsView
from rentease.views.new_flat import NewFlatForm, load_city_options

__all__ = ["FlatsView", "FavoritesView", "NewFlatForm", "load_city_options"]
