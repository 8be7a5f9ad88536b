"""Checkout form."""

import re
from dataclasses import dataclass

from wtforms import Form, StringField, TextAreaField
from wtforms.validators import Length, Optional, Regexp, ValidationError

from storefront.errors import CheckoutValidationError, InvalidRequest

CUSTOMER_INDIVIDUAL = 'individual'
CUSTOMER_LEGAL = 'legal'
CUSTOMER_TYPES = (CUSTOMER_INDIVIDUAL, CUSTOMER_LEGAL)

NON_DIGITS = re.compile(r'\D')
PHONE_PREFIX = re.compile(r'^(\+7|7|8)')
EMAIL_PATTERN = r'^[a-z0-9._%+\-]+@[a-z0-9.\-]+\.[a-z]{2,4}$'

# Form attribute -> key used in request payloads and error details
PAYLOAD_KEYS = {
    'customer_type': 'customerType',
    'name': 'name',
    'phone': 'phone',
    'email': 'email',
    'address': 'address',
    'comment': 'comment',
    'company_name': 'companyName',
    'bin': 'bin',
}


def digits_only(value):
    return NON_DIGITS.sub('', value or '')


class CheckoutForm(Form):
    """Customer and delivery details submitted at checkout.

    Every field is validated independently so that all problems are
    reported in one response. Each rule contributes at most one error.
    """
    customer_type = StringField('Customer Type', default=CUSTOMER_INDIVIDUAL)
    name = StringField('Name', validators=[
        Length(min=2, message='Name must be at least 2 characters')
    ])
    phone = StringField('Phone Number')
    email = StringField('Email', validators=[
        Regexp(EMAIL_PATTERN, flags=re.IGNORECASE, message='Please enter a valid email address')
    ])
    address = StringField('Delivery Address', validators=[
        Length(min=10, message='Address must be at least 10 characters')
    ])
    comment = TextAreaField('Comment', validators=[Optional()])
    company_name = StringField('Company Name')
    bin = StringField('BIN')

    @property
    def is_legal(self):
        return self.customer_type.data == CUSTOMER_LEGAL

    def validate_customer_type(self, field):
        if field.data not in CUSTOMER_TYPES:
            raise ValidationError('Customer type must be "individual" or "legal"')

    def validate_phone(self, field):
        """At least 10 digits, written with a +7, 7 or 8 prefix."""
        if len(digits_only(field.data)) < 10:
            raise ValidationError('Phone number must contain at least 10 digits')
        if not PHONE_PREFIX.match(field.data):
            raise ValidationError('Phone number must start with +7, 7 or 8')

    def validate_company_name(self, field):
        if self.is_legal and not (field.data or '').strip():
            raise ValidationError('Company name is required for legal entities')

    def validate_bin(self, field):
        if not self.is_legal:
            return
        if field.data is None:
            raise ValidationError('BIN is required for legal entities')
        if len(digits_only(field.data)) != 12:
            raise ValidationError('BIN must contain exactly 12 digits')

    def error_details(self):
        """``(field, message)`` pairs in field declaration order."""
        return [(PAYLOAD_KEYS[field.short_name], message)
                for field in self
                for message in field.errors]


@dataclass(frozen=True)
class ApprovedCheckout:
    customer_type: str
    name: str
    phone: str
    email: str
    address: str
    comment: str = None
    company_name: str = None
    bin: str = None


def _form_data(payload):
    data = {}
    for attr, key in PAYLOAD_KEYS.items():
        value = payload.get(key)
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            raise InvalidRequest(f'{key} must be a string')
        data[attr] = str(value)
    return data


def validate_checkout(payload):
    """Validate a checkout payload.

    Returns an ``ApprovedCheckout`` or raises ``CheckoutValidationError``
    listing every violated rule. Has no side effects.
    """
    if not isinstance(payload, dict):
        raise InvalidRequest()

    form = CheckoutForm(data=_form_data(payload))
    if not form.validate():
        raise CheckoutValidationError(form.error_details())

    legal = form.is_legal
    return ApprovedCheckout(
        customer_type=form.customer_type.data,
        name=form.name.data,
        phone=form.phone.data,
        email=form.email.data,
        address=form.address.data,
        comment=form.comment.data or None,
        company_name=form.company_name.data if legal else None,
        bin=form.bin.data if legal else None,
    )
