__all__ = ("NotModifiedError", "InvalidArgument")


class NotModifiedError(Exception): ...


class InvalidArgument(NotModifiedError, ValueError): ...
