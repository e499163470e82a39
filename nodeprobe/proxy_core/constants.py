"""
nodeprobe Configuration Constants
Centralized defaults for probe timeouts, cache windows and scoring rules
"""

# Cache validity windows (in hours)
LOCATION_CACHE_HOURS = 24 * 7
PURITY_CACHE_HOURS = 24

# Geolocation provider settings (in seconds)
PROVIDER_TIMEOUT = 5.0

# Purity probe timeouts (in seconds)
PORT_REACHABILITY_TIMEOUT = 5.0
RESPONSE_STABILITY_TIMEOUT = 3.0
SUCCESS_RATE_TIMEOUT = 2.0

# Purity probe attempt counts and pauses (pauses in milliseconds)
DNS_CONSISTENCY_ATTEMPTS = 3
DNS_CONSISTENCY_INTERVAL_MS = 100
RESPONSE_STABILITY_ATTEMPTS = 3
RESPONSE_STABILITY_INTERVAL_MS = 100
SUCCESS_RATE_ATTEMPTS = 5
SUCCESS_RATE_INTERVAL_MS = 50

# Latency recorded for a failed stability connect (milliseconds)
FAILED_CONNECT_PENALTY_MS = 10000.0

# Pass thresholds
STABILITY_MAX_DEVIATION_RATIO = 0.5
MIN_CONNECTION_SUCCESS_RATE = 0.8

# Purity scoring
PURITY_BASE_SCORE = 100
PURITY_DEFAULT_SCORE = 50
PURITY_MIN_SCORE = 0
PURITY_MAX_SCORE = 100

PORT_REACHABILITY_DEDUCTION = 30
DNS_CONSISTENCY_DEDUCTION = 30
RESPONSE_STABILITY_DEDUCTION = 20
SUCCESS_RATE_DEDUCTION = 20

# Latency check
DEFAULT_DELAY_TEST_URL = 'https://www.gstatic.com/generate_204'
LATENCY_TEST_TIMEOUT = 5.0

# Latency level thresholds (milliseconds)
LATENCY_EXCELLENT_MS = 100
LATENCY_GOOD_MS = 200
LATENCY_FAIR_MS = 500

# HTTP client
DEFAULT_USER_AGENT = 'nodeprobe/1.0'

# CLI defaults
CLI_DEFAULT_THREADS = 8

# Logging configuration
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_LEVEL = 'WARNING'

# Third-party loggers to suppress
NOISY_LOGGERS = [
    'requests',
    'urllib3',
    'urllib3.connectionpool',
]
