import re

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_length(field_name, value, max_length):
    if value is None:
        raise ValueError(f"{field_name} is required.")
    if len(value) > max_length:
        raise ValueError(f"{field_name} must be {max_length} characters or fewer.")


def validate_email(email):
    if not email or not EMAIL_RE.match(email):
        raise ValueError("email must be a valid email address.")


def validate_required(data, *fields):
    """Returns a dict of field -> message for every missing or blank field."""
    errors = {}
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors[field] = [f"The {field} field is required."]
    return errors


def validate_pagination(args, default_per_page, min_per_page, max_per_page):
    """Parse page/per_page/searchTerm query args.

    Returns (page, per_page, search_term, errors).
    """
    errors = {}
    page = args.get("page", 1)
    per_page = args.get("per_page", default_per_page)
    search_term = args.get("searchTerm") or None

    try:
        page = int(page)
        if page < 1:
            errors["page"] = ["The page must be at least 1."]
    except (TypeError, ValueError):
        errors["page"] = ["The page must be an integer."]

    try:
        per_page = int(per_page)
        if per_page < min_per_page or per_page > max_per_page:
            errors["per_page"] = [f"The per_page must be between {min_per_page} and {max_per_page}."]
    except (TypeError, ValueError):
        errors["per_page"] = ["The per_page must be an integer."]

    if search_term is not None and len(search_term) > 255:
        errors["searchTerm"] = ["The searchTerm may not be greater than 255 characters."]

    return page, per_page, search_term, errors
