# xts_interactive/api_client.py
import logging
from typing import Optional, Dict, Any

import requests

from .errors import TransportError
from .logger import format_message

logger = logging.getLogger("xts_interactive.api_client")
logger.setLevel(logging.INFO)

BODY_METHODS = ("POST", "PUT", "PATCH")


class APIClient:
    """
    Issues one HTTP request per call and returns the decoded body.
    Failures are raised as TransportError with kind:
      response     server answered with an error status
      no_response  connection refused / timed out
      request      the request could not be built (bad url, headers ...)
    """
    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.session = session or requests.Session()
        self._timeout = timeout

    def request(self, method: str, url: str, headers: Optional[Dict[str, Any]] = None, data: Any = None):
        method = method.upper()
        hdr = {}
        if headers and headers.get("authorization"):
            hdr["authorization"] = headers["authorization"]
        body = data if method in BODY_METHODS else None

        # only the body keys are logged, values may carry credentials
        if isinstance(body, dict):
            data_content = list(body.keys())
        elif body is not None:
            data_content = type(body).__name__
        else:
            data_content = "N/A"
        logger.info("Request object sent to the server:")
        logger.info(format_message({"url": url, "method": method, "headers": hdr, "dataContent": data_content}))

        try:
            r = self.session.request(method, url, headers=hdr, json=body, timeout=self._timeout)
            r.raise_for_status()
        except requests.HTTPError as e:
            raise self._response_error(e) from e
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.info("Exception object received from the server:")
            logger.info(format_message({"message": "No response received", "error": str(e)}))
            raise TransportError(TransportError.NO_RESPONSE, str(e) or "No response received") from e
        except requests.RequestException as e:
            logger.info("Exception object received from the server:")
            logger.info(format_message({"message": str(e)}))
            raise TransportError(TransportError.REQUEST, str(e) or "Request could not be created") from e

        payload = self._decode(r)
        logger.info("Response object received from the server:")
        logger.info(format_message(payload))
        return payload

    def get(self, url: str, headers: Optional[Dict[str, Any]] = None):
        return self.request("GET", url, headers)

    def post(self, url: str, headers: Optional[Dict[str, Any]] = None, json: Any = None):
        return self.request("POST", url, headers, json)

    def put(self, url: str, headers: Optional[Dict[str, Any]] = None, json: Any = None):
        return self.request("PUT", url, headers, json)

    def delete(self, url: str, headers: Optional[Dict[str, Any]] = None):
        return self.request("DELETE", url, headers)

    @staticmethod
    def _decode(r: requests.Response):
        try:
            return r.json()
        except ValueError:
            return r.text

    def _response_error(self, e: requests.HTTPError) -> TransportError:
        resp = e.response
        status = resp.status_code if resp is not None else None
        data = self._decode(resp) if resp is not None else None
        logger.info("Exception object received from the server:")
        logger.info(format_message({
            "status": status,
            "data": data,
            "headers": dict(resp.headers) if resp is not None and resp.headers is not None else None,
        }))
        message = str(e)
        if isinstance(data, dict) and data.get("description"):
            message = str(data["description"])
        return TransportError(TransportError.RESPONSE, message, status_code=status, data=data)
