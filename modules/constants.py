"""Shared constants for the restaurant API stack & Lambdas."""

# Environment variable keys (set by RestaurantApiStack)
ENV_EVENTS_TABLE = "EVENTS_TABLE_NAME"
ENV_SETTINGS_TABLE = "SETTINGS_TABLE_NAME"

# Routes forwarded by the CloudFront distribution
EVENTS_PATH = "/api/restaurant"
SETTINGS_PATH = "/api/settings"

# Table keys
EVENT_KEY = "EventId"
SETTINGS_KEY = "SettingId"

# The settings table holds a single document under this id
SETTINGS_ID = "restaurant"

DEFAULT_SETTINGS = {
    "restaurantName": "Cloud101 Restaurant",
    "openingTime": "17:00",
    "closingTime": "22:00",
    "maxGuests": 40,
    "reservationsOpen": True,
}

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}
