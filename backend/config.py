# backend/config.py
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

CONFIG = {
    # Provider page templates; %s is replaced with the URL-quoted query
    'MAPS_QUERY_URL': os.environ.get('MAPS_QUERY_URL', 'http://maps.google.com/maps?output=js&q=%s'),
    # Local search: first %s is the place to search near, second the search phrase
    'MAPS_NEAR_URL': os.environ.get('MAPS_NEAR_URL', 'http://maps.google.com/maps?output=js&near=%s&q=%s'),
    'HTTP_TIMEOUT': float(os.environ.get('HTTP_TIMEOUT', '10')),
    'USER_AGENT': os.environ.get('USER_AGENT', 'GeoMaps/1.0'),
    'CACHE_TTL': int(os.environ.get('CACHE_TTL', '300')),
    # CORS settings
    'CORS_SETTINGS': {
        'ORIGINS': os.environ.get('CORS_ORIGINS', '*').split(','),
        'METHODS': ['GET', 'POST', 'OPTIONS'],
        'ALLOW_HEADERS': ['Content-Type', 'Authorization']
    },
    'DEFAULT_ICON': os.environ.get('DEFAULT_ICON', 'http://maps.google.com/mapfiles/marker.png'),
    'DEFAULT_INFO_STYLE': os.environ.get('DEFAULT_INFO_STYLE', 'http://maps.google.com/maps?file=gi&hl=en'),
    'MAX_LOCATIONS': 20,
    'MIN_LOCATIONS': 2,
    'LOG_FILE': os.environ.get('GEOMAPS_LOG_FILE', ''),
}
