"""
Request payload schemas.

Route handlers parse request bodies and query strings through these models
so the service layer only ever sees typed, validated input.
"""
import datetime as dt
import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from errors import ValidationError


# Email validation regex pattern
EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class RegisterRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=1, max_length=120)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value):
        value = value.lower()
        if not EMAIL_REGEX.match(value):
            raise ValueError('Please enter a valid email address')
        return value


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower()


class ExpenseCreate(BaseModel):
    """Body of POST /api/expenses/add.

    ``description`` is the legacy name of ``title`` and is only consulted
    when ``title`` is absent.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    category: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    title: str = Field(..., min_length=1, max_length=200)
    date: Optional[datetime] = None

    @model_validator(mode='before')
    @classmethod
    def accept_legacy_description(cls, data):
        if isinstance(data, dict) and not data.get('title') and data.get('description'):
            data = dict(data)
            data['title'] = data.pop('description')
        return data

    @field_validator('category', 'title', mode='before')
    @classmethod
    def strip_text(cls, value):
        return _strip(value)

    @field_validator('amount', mode='before')
    @classmethod
    def reject_booleans(cls, value):
        # bool is an int subclass; "amount": true must not become 1
        if isinstance(value, bool):
            raise ValueError('Amount must be a number')
        if isinstance(value, float):
            return Decimal(str(value))
        return _strip(value)

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, value):
        if value in (None, ''):
            return None
        if isinstance(value, str):
            value = value.strip()
            try:
                if len(value) == 10:
                    return datetime.strptime(value, '%Y-%m-%d')
                # fromisoformat does not accept a trailing Z before 3.11
                return datetime.fromisoformat(value.replace('Z', '+00:00'))
            except ValueError:
                raise ValueError('Date must be YYYY-MM-DD or an ISO datetime')
        return value

    @field_validator('date')
    @classmethod
    def drop_timezone(cls, value):
        # Stored as naive UTC
        if value is not None and value.tzinfo is not None:
            try:
                value = value.astimezone(timezone.utc).replace(tzinfo=None)
            except OverflowError:
                raise ValueError('Date out of range')
        return value


class ExpenseFilters(BaseModel):
    """Query string of GET /api/expenses."""

    category: Optional[str] = None
    date: Optional[dt.date] = None

    @field_validator('category', mode='before')
    @classmethod
    def blank_category(cls, value):
        value = _strip(value)
        return value or None

    @field_validator('date', mode='before')
    @classmethod
    def parse_day(cls, value):
        value = _strip(value)
        if not value:
            return None
        if isinstance(value, str):
            try:
                if len(value) == 10:
                    return datetime.strptime(value, '%Y-%m-%d').date()
                return datetime.fromisoformat(value.replace('Z', '+00:00')).date()
            except ValueError:
                raise ValueError('Date must be YYYY-MM-DD or an ISO datetime')
        return value


def _field_name(error):
    loc = error.get('loc') or ()
    return '.'.join(str(part) for part in loc) or 'body'


def _reason(error):
    # null and "" count as absent
    if error.get('type') == 'missing' or error.get('input') in (None, ''):
        return 'This field is required'
    msg = error.get('msg', 'Invalid value')
    # pydantic prefixes messages raised from validators
    return msg.removeprefix('Value error, ')


def parse_payload(schema, data):
    """Validate ``data`` against ``schema``.

    Args:
        schema: A pydantic model class
        data: Mapping from the request body or query string (may be None)

    Returns:
        An instance of ``schema``

    Raises:
        ValidationError: Listing every missing or invalid field
    """
    if data is None:
        raise ValidationError('Request body required')
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')

    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        errors = {}
        for error in e.errors():
            errors.setdefault(_field_name(error), _reason(error))
        missing = sorted(name for name, reason in errors.items() if reason == 'This field is required')
        if missing:
            message = f"Missing required fields: {', '.join(missing)}"
        else:
            message = f"Invalid fields: {', '.join(sorted(errors))}"
        raise ValidationError(message, errors=errors)
