from functools import wraps


class DCError(Exception):
    '''
    Base of every error the calculator reports to its user.

    Any DCError aborts the whole run.
    '''


class ParseFailure(DCError):
    pass


class UnterminatedCommand(DCError):
    pass


class TypeMismatch(DCError):
    pass


class Unimplemented(DCError):
    pass


class DivideByZero(DCError):
    pass


class RecursionLimit(DCError):
    pass


def wrap_user_errors(fmt, error=DCError):
    '''
    Ugly hack decorator that converts exceptions to user errors.

    Passes through DCErrors. Anything else is reraised as ``error``, with
    ``fmt`` formatted against the wrapped function's arguments.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except DCError:
                raise
            except Exception as e:
                raise error(fmt.format(*args, **kwargs)) from e
        return wrapper
    return decorator
