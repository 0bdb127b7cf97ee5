"""
Exchange-rate client for the API gateway.

Builds form-encoded POST requests, signs them with the SDK-HMAC-SHA256
signer and decodes the gateway's JSON envelope.
"""

import logging
from typing import Optional

import requests

from .constants import DEFAULT_CONFIG, FORM_CONTENT_TYPE, HEADER_CONTENT_TYPE
from .exceptions import (
    ConfigurationError,
    ExchangeRateError,
    HTTPError,
    ResponseError,
    SigningError,
)
from .models import ExchangeRateItem, ExchangeRateQueryResult
from .signer import Signer


class ExchangeRateClient:
    """
    Client for the gateway's exchange-rate query endpoint.

    Application failures (``success: false``) raise ExchangeRateError no
    matter which HTTP status carried them.
    """

    def __init__(
        self,
        exchange_rate_url: str,
        access_key: str,
        secret_key: str,
        logger: Optional[logging.Logger] = None,
        session: Optional[requests.Session] = None,
        **config,
    ):
        """
        Initialize exchange-rate client.

        Args:
            exchange_rate_url: Full URL of the exchange-rate endpoint
            access_key: Gateway access key id
            secret_key: Gateway secret key
            logger: Logger for query records (defaults to the module logger)
            session: HTTP session to use; one is created and owned otherwise
            **config: Configuration options (timeout)
        """
        self.exchange_rate_url = exchange_rate_url
        self.access_key = access_key
        self.secret_key = secret_key
        self.logger = logger or logging.getLogger(__name__)

        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}

        self._validate_config()

        self.signer = Signer(access_key, secret_key, logger=self.logger)
        self._owns_session = session is None
        self.session = session or requests.Session()

    def _validate_config(self):
        """Validate client configuration."""
        if not self.exchange_rate_url:
            raise ConfigurationError("exchange_rate_url cannot be empty")

        if not self.access_key:
            raise ConfigurationError("access_key cannot be empty")

        if not self.secret_key:
            raise ConfigurationError("secret_key cannot be empty")

        if self.config['timeout'] <= 0:
            raise ConfigurationError("timeout must be positive")

    def _prepare_request(self, form: dict) -> requests.PreparedRequest:
        request = requests.Request(
            'POST',
            self.exchange_rate_url,
            data=form,
            headers={HEADER_CONTENT_TYPE: FORM_CONTENT_TYPE},
        )
        return self.session.prepare_request(request)

    def query_exchange_rate(self, from_code: str, to_code: str, money: str = "1") -> ExchangeRateItem:
        """
        Query the conversion rate between two currencies.

        Args:
            from_code: Source currency code, e.g. "CNY"
            to_code: Target currency code, e.g. "USD"
            money: Amount to convert

        Returns:
            ExchangeRateItem from the response ``data`` field

        Raises:
            SigningError: If the request cannot be signed
            HTTPError: If the request cannot be sent
            ResponseError: If the response is not the expected JSON envelope
            ExchangeRateError: If the gateway reports ``success: false``
        """
        fields = {"from_code": from_code, "to_code": to_code}
        try:
            form = {"fromCode": from_code, "toCode": to_code, "money": money}

            try:
                request = self._prepare_request(form)
            except (ValueError, requests.RequestException) as e:
                self._log_failure("build request", e, fields)
                raise HTTPError(f"Failed to build request: {e}") from e
            fields["post_data"] = request.body

            try:
                self.signer.sign(request)
            except SigningError as e:
                self._log_failure("sign", e, fields)
                raise

            try:
                response = self.session.send(request, timeout=self.config['timeout'])
            except requests.RequestException as e:
                self._log_failure("send", e, fields)
                raise HTTPError(f"HTTP request failed: {e}") from e

            fields["response"] = response.text
            result = self._parse_response(response, fields)

            if not result.success:
                fields.update(code=result.code, error_msg=result.msg)
                raise ExchangeRateError(result.msg, code=result.code)

            return result.data
        finally:
            self.logger.info("Query exchange rate", extra=fields)

    def _parse_response(self, response: requests.Response, fields: dict) -> ExchangeRateQueryResult:
        """Decode the JSON envelope of an exchange-rate response."""
        try:
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
            return ExchangeRateQueryResult.from_dict(payload)
        except (ValueError, TypeError) as e:
            self._log_failure("parse", e, fields)
            raise ResponseError(f"Invalid response body: {e}") from e

    def _log_failure(self, stage: str, error: Exception, fields: dict):
        self.logger.error("Exchange rate query failed to %s: %s", stage, error, extra=fields)

    def close(self):
        """Close HTTP session if the client created it."""
        if self.session and self._owns_session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
