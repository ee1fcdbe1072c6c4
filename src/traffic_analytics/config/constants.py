"""
Constants for bot classification and session reconstruction.
"""

# =============================================================================
# Session Configuration
# =============================================================================

# Consecutive events of one visitor further apart than this start a new session
SESSION_TIMEOUT_MS = 30 * 60 * 1000

# =============================================================================
# Bot Classification
# =============================================================================

# Fixed confidence per identity signal
USER_AGENT_CONFIDENCE = 95
IP_RANGE_CONFIDENCE = 85

# Behavioral score at or above which a request is flagged
BEHAVIORAL_BOT_THRESHOLD = 50

# Case-insensitive regex signatures matched anywhere in the user-agent
BOT_USER_AGENT_PATTERNS = [
    # Search engine crawlers
    "googlebot",
    "bingbot",
    "slurp",  # Yahoo
    "duckduckbot",
    "baiduspider",
    "yandexbot",
    "sogou",
    "exabot",
    # Social media bots
    "facebookexternalhit",
    "twitterbot",
    "linkedinbot",
    "pinterest",
    "slackbot",
    "telegrambot",
    "whatsapp",
    # SEO/analytics tools
    "ahrefsbot",
    "semrushbot",
    "majestic",
    "mj12bot",
    "dotbot",
    "rogerbot",
    "screaming frog",
    # Archive crawlers
    r"archive\.org_bot",
    "ia_archiver",
    "wayback",
    # Generic bot indicators
    "bot",
    "crawler",
    "spider",
    "scraper",
    # HTTP client libraries
    "curl",
    "wget",
    "python-requests",
    "java/",
    "go-http-client",
    "axios",
    "node-fetch",
    # Monitoring/uptime services
    "pingdom",
    "uptimerobot",
    "newrelic",
    "datadog",
    "site24x7",
    # Security scanners
    "nikto",
    "nessus",
    "qualys",
    "acunetix",
    "nmap",
    # CDN bots
    "cloudflare",
    "akamai",
    "fastly",
    # Headless browsers and automation
    "headlesschrome",
    "phantomjs",
    "selenium",
    "puppeteer",
    "playwright",
]

# Literal string prefixes of known crawler address space
BOT_IP_PREFIXES = [
    "66.249.",  # Google
    "40.77.",  # Bing
    "157.55.",  # Bing
    "207.46.",  # Bing
]

# Behavioral thresholds
RAPID_REQUESTS_PER_MINUTE = 100
SHORT_SESSION_DURATION_MS = 2000
HIGH_REQUEST_COUNT = 50
REFERER_REQUEST_COUNT = 5

# Penalty added to the behavioral score per triggered indicator
BEHAVIOR_WEIGHTS = {
    "rapid_requests": 30,
    "short_session": 20,
    "no_javascript": 25,
    "perfect_sequential": 25,
    "zero_error_rate": 15,
    "missing_accept_language": 10,
    "missing_referer": 10,
}

# =============================================================================
# Report Limits
# =============================================================================

TOP_PAGES_LIMIT = 10
TOP_REFERRERS_LIMIT = 10
TOP_BROWSERS_LIMIT = 5
TOP_LOCATIONS_LIMIT = 10

# Placeholder buckets
DIRECT_REFERRER = "Direct"
UNKNOWN_LOCATION = "Unknown"
UNKNOWN_IDENTITY = "unknown"

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
