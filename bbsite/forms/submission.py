"""HTTP client used by the form wizard to post submissions."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import requests

from bbsite import config as app_config
from bbsite.utils.logging import get_logger

LOG = get_logger("bbsite.forms.submission")


class SubmissionError(RuntimeError):
    def __init__(self, code: str, status_code: Optional[int] = None):
        super().__init__(code)
        self.code = code
        self.status_code = status_code


class SubmissionClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        if base_url is None:
            base_url = app_config.site_url() or ""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else app_config.submission_timeout()
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def _decode(resp) -> Dict[str, Any]:
        if not resp.content:
            return {}
        try:
            body = resp.json()
        except ValueError:
            raise SubmissionError("invalid_response", resp.status_code) from None
        return body if isinstance(body, dict) else {}

    def post(self, path: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        url = self._url(path)
        try:
            resp = self.session.post(url, json=dict(payload), timeout=self.timeout)
        except requests.RequestException as exc:
            LOG.warning("Submission request to %s failed: %s", url, exc)
            raise SubmissionError("network_error") from exc

        if resp.status_code == 401:
            # Not signed in; caller sees a body without an entity. Auth
            # proxies may answer with HTML, which carries nothing we need.
            try:
                return self._decode(resp)
            except SubmissionError:
                return {}
        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            code = body.get("error") if isinstance(body, dict) else None
            raise SubmissionError(code or "http_error", resp.status_code)
        return self._decode(resp)


__all__ = ["SubmissionError", "SubmissionClient"]
