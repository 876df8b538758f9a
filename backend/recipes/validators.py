from django.core.exceptions import ValidationError

from recipes.constants import INGREDIENT_MAX_LEN


def validate_ingredient_list(value, allow_empty: bool = False):
    if value is None:
        return value
    if not isinstance(value, list):
        raise ValidationError("Ingredients must be an array")
    if not value and not allow_empty:
        raise ValidationError("At least one ingredient is required")
    for item in value:
        if not isinstance(item, str):
            raise ValidationError("Every ingredient must be a string")
        if len(item) > INGREDIENT_MAX_LEN:
            raise ValidationError(
                f"Ingredient longer than {INGREDIENT_MAX_LEN} characters"
            )
    return value


def validate_optional_ingredient_list(value):
    return validate_ingredient_list(value, allow_empty=True)
