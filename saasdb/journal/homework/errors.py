class HomeworkError(Exception):
    pass


class HomeworkNotFoundError(HomeworkError):
    pass


class HomeworkTransitionError(HomeworkError):
    pass
