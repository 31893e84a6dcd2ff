from flask import jsonify


def format_datetime(datetime_obj):
    """Format datetime to a readable string."""
    if not datetime_obj:
        return None
    return datetime_obj.strftime('%d.%m.%Y %H:%M:%S')


def format_date(datetime_obj):
    if not datetime_obj:
        return None
    return datetime_obj.strftime('%d.%m.%Y')


def validation_error(errors):
    return jsonify({
        "success": False,
        "message": "Validation failed",
        "errors": errors
    }), 422


def paginate(query, page, per_page, transform):
    """Paginate a query and shape it the way the frontend table component expects."""
    total = query.order_by(None).count()
    items = query.limit(per_page).offset((page - 1) * per_page).all()
    last_page = max(1, -(-total // per_page))
    return {
        "current_page": page,
        "per_page": per_page,
        "total": total,
        "last_page": last_page,
        "data": [transform(item) for item in items],
    }


def clamp_subtract(value, amount):
    return max(0, (value or 0) - (amount or 0))
