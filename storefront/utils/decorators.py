"""Request decorators: session identity carried in the ``X-Session-ID`` header."""

import uuid
from functools import wraps
from flask import after_this_request, current_app, g, request
from storefront.errors import MissingSession
from storefront.utils.logging import add_context


def _header_name():
    return current_app.config['SESSION_HEADER']


def current_session_id():
    """Session id resolved for this request, if any."""
    return g.get('session_id')


def with_session(f):
    """Use the caller's session id, or issue a new one and return it in the response header."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        header = _header_name()
        session_id = request.headers.get(header, '').strip()
        if not session_id:
            session_id = str(uuid.uuid4())
            add_context(session_id=session_id)

            @after_this_request
            def expose_session(response):
                response.headers[header] = session_id
                return response

        g.session_id = session_id
        return f(*args, **kwargs)
    return decorated_function


def session_required(f):
    """Decorator to require an existing session id."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        header = _header_name()
        session_id = request.headers.get(header, '').strip()
        if not session_id:
            raise MissingSession(f'{header} header is required')
        g.session_id = session_id
        return f(*args, **kwargs)
    return decorated_function
