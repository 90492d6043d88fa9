"""Exceptions raised by consumers, models and collections.

Transport failures (connection refused, DNS errors, timeouts...) are not
wrapped: whatever the injected client raises propagates unchanged.
"""

__all__ = ["InvalidArgument", "UnboundConsumer", "RemoteRejection"]


class InvalidArgument(TypeError):
    """A constructor was given input it cannot accept"""


class UnboundConsumer(ReferenceError):
    """A model class was used without any reachable consumer"""


class RemoteRejection(Exception):
    """The API answered with an unsuccessful status code

    Parameters
    ----------
    response: ~consume.http.Response
        the raw response, for inspection by the caller
    """

    def __init__(self, response):
        super().__init__(response)
        self.response = response

    @property
    def status_code(self):
        return self.response.status_code

    def __str__(self):
        return "API rejected the request with status {}".format(
            self.response.status_code
        )
