"""Error taxonomy shared by providers, the weather service and the reconstruction engine."""


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""
    pass


class LocationNotFound(WeatherProviderError):
    """The provider or geocoder cannot resolve the requested location."""
    pass


class UpstreamUnavailable(WeatherProviderError):
    """Network failure, timeout, 5xx or an unparsable response."""
    pass


class UpstreamRateLimited(WeatherProviderError):
    """The provider rejected the call with HTTP 429."""
    pass


class UpstreamUnauthorized(WeatherProviderError):
    """Bad API key, or the subscription lacks access to the endpoint."""
    pass


class InvalidParameter(ValueError):
    """A malformed request, rejected before any upstream call is made."""
    pass


# Errors that retrying the same request will not fix
NON_RETRYABLE_ERRORS = (LocationNotFound, UpstreamUnauthorized, UpstreamRateLimited)
