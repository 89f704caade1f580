class PromoError(Exception):
    pass


class PromoNotFoundError(PromoError):
    pass


class PromoInactiveError(PromoError):
    pass


class PromoExpiredError(PromoError):
    pass


class PromoNotYetValidError(PromoError):
    pass


class PromoDepletedError(PromoError):
    pass


class PromoNotApplicableError(PromoError):
    pass


class PromoAlreadyRedeemedError(PromoError):
    pass
