from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Server configuration
PORT = config.get("PORT", 3001)
LOG_LEVEL = config.get("LOG_LEVEL", "info")
BIND_ADDRESS = config.get("BIND_ADDRESS", "0.0.0.0")

# "production" switches on secure cookies, HSTS and terse error bodies
ENVIRONMENT = config.get_choice("ENVIRONMENT", "development", ("development", "test", "production"))
IS_PRODUCTION = ENVIRONMENT == "production"

# Frontend origin: post-login redirect target and CORS origin
FRONTEND_URL = config.get_url("FRONTEND_URL", "http://localhost:5173")

# Spotify application credentials (required unless mock mode is on)
SPOTIFY_CLIENT_ID = config.get("SPOTIFY_CLIENT_ID", "")
SPOTIFY_CLIENT_SECRET = config.get("SPOTIFY_CLIENT_SECRET", "")
SPOTIFY_REDIRECT_URI = config.get("SPOTIFY_REDIRECT_URI", "")
REQUIRED_SPOTIFY_VARS = ("SPOTIFY_CLIENT_ID", "SPOTIFY_CLIENT_SECRET", "SPOTIFY_REDIRECT_URI")

# Serve a canned catalogue instead of talking to Spotify
USE_MOCK_SPOTIFY = config.get("USE_MOCK_SPOTIFY", False)

# Spotify endpoints (hardcoded - not user configurable)
SPOTIFY_ACCOUNTS_URL = "https://accounts.spotify.com"
SPOTIFY_API_URL = "https://api.spotify.com/v1"
SPOTIFY_SCOPES = "streaming user-modify-playback-state user-read-private"

# Key-value store: "redis" or "memory" (single process only)
STORE_BACKEND = config.get_choice("STORE_BACKEND", "redis", ("redis", "memory"))
REDIS_URL = config.get("REDIS_URL", "redis://localhost:6379")

# TTLs for entries in the key-value store
PKCE_TTL_SECONDS = 300
SEARCH_CACHE_TTL_SECONDS = 120
ALBUM_CACHE_TTL_SECONDS = 300

# Session cookie
SESSION_SECRET = config.get(
    "SESSION_SECRET",
    "fallback_session_secret_key_for_development_only_not_for_production_use_generate_your_own",
)
SESSION_SECRET_MIN_LENGTH = 32
SESSION_COOKIE_NAME = "sessionId"
SESSION_MAX_AGE_SECONDS = 7 * 24 * 60 * 60

# Timeout configuration for outbound Spotify calls
CONNECT_TIMEOUT = config.get("CONNECT_TIMEOUT", 10.0)
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 30.0)
