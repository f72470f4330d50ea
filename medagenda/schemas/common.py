import re

CLOCK_TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')
HEX_COLOR_PATTERN = re.compile(r'^#(?:[0-9a-fA-F]{3}){1,2}$')


def normalize_clock_time(value: str) -> str:
    normalized = value.strip()
    if not CLOCK_TIME_PATTERN.match(normalized):
        raise ValueError('Times must use the 24-hour HH:MM format.')
    return normalized


def normalize_optional_clock_time(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return normalize_clock_time(value)


def normalize_color(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    if not HEX_COLOR_PATTERN.match(normalized):
        raise ValueError('Colors must be hex values such as #3B82F6.')
    return normalized


def normalize_required_text(value: str, field_name: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError(f'{field_name} is required.')
    return normalized


def updated_fields(update_model) -> dict:
    """Only the fields a partial update explicitly carried."""
    return {name: getattr(update_model, name) for name in update_model.model_fields_set}
