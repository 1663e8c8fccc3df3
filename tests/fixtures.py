"""Geocoding payloads shaped like the upstream search API."""

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"

SPRINGFIELD_IL = {
    "id": 4250542, "name": "Springfield", "latitude": 39.80172, "longitude": -89.64371,
    "elevation": 182.0, "feature_code": "PPLA", "country_code": "US", "admin1": "Illinois",
    "admin2": "Sangamon", "timezone": "America/Chicago", "population": 116250,
    "country": "United States", "country_id": 6252001,
}
SPRINGFIELD_MO = {
    "id": 4409896, "name": "Springfield", "latitude": 37.21533, "longitude": -93.29824,
    "elevation": 397.0, "feature_code": "PPLA2", "country_code": "US", "admin1": "Missouri",
    "admin2": "Greene", "timezone": "America/Chicago", "population": 169176,
    "country": "United States", "country_id": 6252001,
}
SPRINGFIELD_MA = {
    "id": 4951788, "name": "Springfield", "latitude": 42.10148, "longitude": -72.58981,
    "elevation": 21.0, "feature_code": "PPLA2", "country_code": "US", "admin1": "Massachusetts",
    "admin2": "Hampden", "timezone": "America/New_York", "population": 155929,
    "country": "United States", "country_id": 6252001,
}
SPRINGFIELD_PAYLOAD = {"results": [SPRINGFIELD_IL, SPRINGFIELD_MO, SPRINGFIELD_MA], "generationtime_ms": 0.7}

TOKYO = {
    "id": 1850147, "name": "Tokyo", "latitude": 35.6895, "longitude": 139.69171,
    "elevation": 44.0, "feature_code": "PPLC", "country_code": "JP", "admin1": "Tokyo",
    "timezone": "Asia/Tokyo", "population": 8336599, "country": "Japan", "country_id": 1861060,
}
TOKYO_PAYLOAD = {"results": [TOKYO]}

PARIS_FR = {
    "id": 2988507, "name": "Paris", "latitude": 48.85341, "longitude": 2.3488,
    "elevation": 42.0, "feature_code": "PPLC", "country_code": "FR", "admin1": "Île-de-France",
    "timezone": "Europe/Paris", "population": 2138551, "country": "France", "country_id": 3017382,
}
PARIS_TX = {
    "id": 4717560, "name": "Paris", "latitude": 33.66094, "longitude": -95.55551,
    "elevation": 183.0, "feature_code": "PPLA2", "country_code": "US", "admin1": "Texas",
    "timezone": "America/Chicago", "population": 24782, "country": "United States", "country_id": 6252001,
}
PARISH_LAKE = {
    "id": 5101001, "name": "Parish Lake", "latitude": 44.1, "longitude": -74.2,
    "feature_code": "LK", "country_code": "US", "admin1": "New York",
    "timezone": "America/New_York", "country": "United States", "country_id": 6252001,
}
PARIS_PAYLOAD = {"results": [PARISH_LAKE, PARIS_FR, PARIS_TX]}

EMPTY_PAYLOAD = {"generationtime_ms": 0.3}
