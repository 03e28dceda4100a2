from typing import Optional

import httpx

from chauffeur_api.core.cache import TTLCache
from chauffeur_api.core.logger import get_logger
from chauffeur_api.models.response import VerificationResult

logger = get_logger(__name__)

DEFAULT_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"

SCORE_TOO_LOW = "score-too-low"
ACTION_MISMATCH = "action-mismatch"
VERIFICATION_UNAVAILABLE = "verification-unavailable"


class RecaptchaVerifier:
    """
    Redeems client tokens against the reCAPTCHA siteverify endpoint.

    Service replies are cached per token, failures included, so a client
    resubmitting the same token costs one remote call per ``cache.ttl``.
    Transport errors are reported as invalid results and are not cached.
    """

    def __init__(
        self,
        secret: str,
        cache: TTLCache[VerificationResult],
        score_threshold: float = 0.5,
        verify_url: str = DEFAULT_VERIFY_URL,
        timeout: float = 10.0,
        allow_test_token: bool = False,
        test_token: str = "TESTING_TOKEN",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.secret = secret
        self.cache = cache
        self.score_threshold = score_threshold
        self.verify_url = verify_url
        self.timeout = timeout
        self.allow_test_token = allow_test_token
        self.test_token = test_token
        self._transport = transport

    async def verify(self, token: str, expected_action: Optional[str] = None) -> VerificationResult:
        if self.allow_test_token and token == self.test_token:
            logger.debug("reCAPTCHA verification bypassed for testing token")
            return VerificationResult(valid=True)

        reply = self.cache.get(token)
        if reply is None:
            reply = await self._siteverify(token)
            if reply is None:
                return VerificationResult(valid=False, error_codes=[VERIFICATION_UNAVAILABLE])
            self.cache.set(token, reply)
        else:
            logger.info("reCAPTCHA cache hit")

        return self._apply_policy(reply, expected_action)

    def _apply_policy(self, reply: VerificationResult, expected_action: Optional[str]) -> VerificationResult:
        if not reply.valid:
            logger.warning(f"reCAPTCHA verification failed: {reply.error_codes}")
            return reply

        if reply.score is not None and reply.score < self.score_threshold:
            logger.warning(f"reCAPTCHA score too low: {reply.score} < {self.score_threshold}")
            return reply.model_copy(update={"valid": False, "error_codes": [*reply.error_codes, SCORE_TOO_LOW]})

        if expected_action and reply.action and reply.action != expected_action:
            logger.warning(f"reCAPTCHA action mismatch: expected {expected_action}, received {reply.action}")
            return reply.model_copy(update={"valid": False, "error_codes": [*reply.error_codes, ACTION_MISMATCH]})

        return reply

    async def _siteverify(self, token: str) -> Optional[VerificationResult]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.verify_url,
                    data={"secret": self.secret, "response": token},
                )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"reCAPTCHA verification request failed: {e}")
            return None
        except ValueError as e:
            logger.error(f"reCAPTCHA verification returned an unreadable body: {e}")
            return None

        if not isinstance(data, dict):
            logger.error(f"Unexpected reCAPTCHA response structure: {data}")
            return None

        score = data.get("score")
        try:
            score = float(score) if score is not None else None
        except (TypeError, ValueError):
            score = None

        return VerificationResult(
            valid=data.get("success") is True,
            score=score,
            action=data.get("action"),
            error_codes=[str(code) for code in data.get("error-codes") or []],
        )
