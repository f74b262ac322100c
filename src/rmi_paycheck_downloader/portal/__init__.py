from .auth import Authenticator
from .downloader import DEFAULT_FILE_PREFIX, RecordDownloader, paycheck_filename
from .driver import PageDriver, SessionDriver
from .listing import ListingExtractor, build_record_entries, normalize_date
from .selectors import PortalSelectors
from .session import AutomationSession

__all__ = [
    "Authenticator",
    "AutomationSession",
    "DEFAULT_FILE_PREFIX",
    "ListingExtractor",
    "PageDriver",
    "PortalSelectors",
    "RecordDownloader",
    "SessionDriver",
    "build_record_entries",
    "normalize_date",
    "paycheck_filename",
]
