from places.geocoder import Geocoder, GeocodingError, GoogleGeocoder, Place

__all__ = ["Geocoder", "GeocodingError", "GoogleGeocoder", "Place"]
