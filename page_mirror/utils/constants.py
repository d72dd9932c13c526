"""
Shared constants for the page mirror.

Contains the default storage layout and network settings.
"""

# Default user agent string for all HTTP requests
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Default request timeout in seconds
DEFAULT_TIMEOUT = 30

# Default concurrent image downloads
DEFAULT_CONCURRENCY = 10

# Root folder holding every mirrored site, relative to the working directory
DEFAULT_STORAGE_ROOT = "wget_downloads"

# State file with the next fallback page number
COUNTER_FILE_NAME = "last_site_ID"

# Image subfolder inside each host folder
IMAGE_FOLDER = "img"

# Characters that may not appear in a saved file name
FORBIDDEN_FILENAME_CHARS = '/\\:*?<>|'

# Alt text longer than this is shortened in the image listing
ALT_TEXT_WIDTH = 20
