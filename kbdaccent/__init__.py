"""kbdaccent - keep an OpenRGB keyboard in sync with the desktop accent color"""

__version__ = "0.1.0"
