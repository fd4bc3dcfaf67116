import functools
import logging
import sqlite3

from Tuitiondesk.core.errors import ScopeError, ValidationError
from Tuitiondesk.core.results import SCOPE, STORE, VALIDATION, Outcome

logger = logging.getLogger(__name__)


def reported(failure_message):
    """Turn the errors a service can hit into a failed Outcome.

    Validation and scope errors are expected and logged as warnings; store
    errors are logged with their traceback and never retried.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ValidationError as e:
                logger.warning("%s: %s", func.__name__, e)
                return Outcome.failure(VALIDATION, str(e))
            except ScopeError as e:
                logger.warning("%s: %s", func.__name__, e)
                return Outcome.failure(SCOPE, str(e))
            except sqlite3.Error as e:
                logger.exception("%s", failure_message)
                return Outcome.failure(STORE, f"{failure_message}: {e}")
        return wrapper
    return decorator
