TAG_NAME_MAX_LEN = 64
CATEGORY_NAME_MAX_LEN = 64
RECIPE_TITLE_MAX_LEN = 255
INGREDIENT_MAX_LEN = 255
COMMENT_MAX_LEN = 1000
MEDIA_URL_MAX_LEN = 500
MEDIA_PUBLIC_ID_MAX_LEN = 255
MEDIA_FILENAME_MAX_LEN = 255
MEDIA_MIME_MAX_LEN = 100
ALT_TEXT_MAX_LEN = 255

PREP_TIME_MIN = 0
COOK_TIME_MIN = 0
SERVINGS_MIN = 1
