class RequestError(Exception):
    """
    A failure the client caused and can be told about.

    Carries the HTTP status to answer with (400, 401, 403, 404) and a message
    that is safe to show. Anything that is not a RequestError is a fault and
    is answered with a generic 500.
    """

    def __init__(self, status, message, details=None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.details = details

    def __str__(self):
        return f"{self.status}: {self.message}"
