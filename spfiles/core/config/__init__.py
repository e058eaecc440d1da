from .helpers import parse_bytes
from .loader import load_site_config
from .profiles import ProfileManager
from .site_config import SiteConfig

__all__ = ["ProfileManager", "SiteConfig", "load_site_config", "parse_bytes"]
