class ExposureError(Exception):
    pass


class ExposureStepNotFoundError(ExposureError):
    pass
