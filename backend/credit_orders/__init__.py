"""Credit Orders API - customer orders with rolling-window credit validation"""

__version__ = "1.0.0"
