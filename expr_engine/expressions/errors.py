class ExpressionError(Exception):
    pass


class ExpressionResolveError(ExpressionError):
    def __init__(self, expression: str, reason: str):
        self.expression = expression
        self.reason = reason
        super().__init__(f"Cannot resolve '{expression}': {reason}")


class SuggestionApplyError(ExpressionError):
    def __init__(self, message: str):
        super().__init__(message)
