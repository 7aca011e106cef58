"""
WeatherNow announcement server

In-memory announcement store and admin API polled by WeatherNow kiosks.
"""

__version__ = "1.0.0"
