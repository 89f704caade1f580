class AffiliateError(Exception):
    pass


class AffiliateNotFoundError(AffiliateError):
    pass


class AffiliateInactiveError(AffiliateError):
    pass


class AffiliateSelfReferralError(AffiliateError):
    pass
