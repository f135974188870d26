from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_seasurf import SeaSurf
from flask_talisman import Talisman

# Bound to the app in create_app() via .init_app()
csrf = SeaSurf()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per day", "200 per hour"],
    storage_uri="memory://",
)
talisman = Talisman()

# Content Security Policy: JSON API only, plus the providers it talks to
CSP = {
    'default-src': ["'self'"],
    'img-src': ["'self'", "data:", "https://*.openweathermap.org"],
    'connect-src': ["'self'", "https://api.openweathermap.org",
                    "https://nominatim.openstreetmap.org"],
}
