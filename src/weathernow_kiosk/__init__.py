"""
WeatherNow Kiosk - announcement client

Polls the WeatherNow announcement server and shows new announcements as
banners or popups, with chimes and optional narration.
"""

__version__ = "1.0.0"


# Lazy imports so config tooling works without the audio stack loaded
def __getattr__(name):
    if name == "Kiosk":
        from .kiosk import Kiosk
        return Kiosk
    elif name == "Config":
        from .config import Config
        return Config
    elif name == "load_config":
        from .config import load_config
        return load_config
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["Kiosk", "Config", "load_config", "__version__"]
