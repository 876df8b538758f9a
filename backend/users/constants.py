from datetime import timedelta

EMAIL_MAX_LEN = 254
NAME_MAX_LEN = 150

ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLE_VIEWER = "viewer"

LANGUAGE_EN = "en"
LANGUAGE_ES = "es"

INVITE_TOKEN_BYTES = 32
INVITE_TOKEN_TTL = timedelta(days=7)
SESSION_TOKEN_TTL = timedelta(days=7)
