"""Pagination defaults and user-facing messages of the API."""

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50
PAGE_SIZE_QUERY_PARAM = "limit"

# Input limits
PASSWORD_MIN_LEN = 8
SHARE_MESSAGE_MAX_LEN = 500

# Uploads
UPLOAD_FIELD = "file"
ALLOWED_IMAGE_EXTENSIONS = {"jpeg", "jpg", "png", "gif", "webp"}
ALLOWED_VIDEO_EXTENSIONS = {"mp4", "mov", "avi"}

# Messages
MSG_TOKEN_REQUIRED = "Access token required"
MSG_INVALID_TOKEN = "Invalid or expired token"
MSG_INACTIVE_USER = "Invalid or inactive user"
MSG_ACCESS_DENIED = "Access denied"
MSG_INSUFFICIENT_PERMISSIONS = "Insufficient permissions"
MSG_INVALID_CREDENTIALS = "Invalid credentials"
MSG_INVALID_INVITE = "Invalid or expired invite token"
MSG_EMAIL_TAKEN = "Email already registered"
MSG_EMAIL_INVITED = "Email already registered or invited"
MSG_RECIPE_NOT_FOUND = "Recipe not found"
MSG_COMMENT_NOT_FOUND = "Comment not found"
MSG_MEDIA_NOT_FOUND = "Media not found"
MSG_FAVORITE_EXISTS = "Recipe already in favorites"
MSG_FAVORITE_NOT_FOUND = "Favorite not found"
MSG_NO_FILE = "No file uploaded"
MSG_UPLOAD_FAILED = "Failed to upload file"
MSG_RATE_LIMITED = "Too many requests from this IP, please try again later."
MSG_SERVER_ERROR = "Something went wrong!"
