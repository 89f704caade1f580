class IdentityError(Exception):
    pass


class UserNotFoundError(IdentityError):
    pass
