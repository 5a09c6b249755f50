"""TfL unified API client for StopPoint arrivals."""

from __future__ import annotations

from typing import Any

import requests

TFL_API_BASE = "https://api.tfl.gov.uk"


class TflClientError(Exception):
    """Raised when a TfL API request fails or returns a non-200 response."""


class TflClient:
    """Thin wrapper around the TfL API using requests."""

    def __init__(self, app_id: str = "", app_key: str = "") -> None:
        self._app_id = app_id
        self._app_key = app_key
        self._timeout_seconds = 10

    def get_arrivals(self, stop_id: str) -> list[dict[str, Any]]:
        """Fetch predicted arrivals at a stop; returns the raw JSON list."""
        response_json = self._get(f"/StopPoint/{stop_id}/arrivals")
        if not isinstance(response_json, list):
            raise TflClientError("TfL API response was not a list of arrivals")
        return response_json

    def _get(self, path: str) -> Any:
        url = f"{TFL_API_BASE}{path}"
        params = {}
        if self._app_id:
            params["app_id"] = self._app_id
        if self._app_key:
            params["app_key"] = self._app_key
        try:
            response = requests.get(url, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise TflClientError(f"TfL API request failed: {exc}") from exc

        if response.status_code != 200:
            body_text = response.text.strip()
            detail = f"Status {response.status_code}"
            if body_text:
                detail = f"{detail}, Body: {body_text}"
            raise TflClientError(f"TfL API request failed: {detail}")

        try:
            return response.json()
        except ValueError as exc:
            raise TflClientError("TfL API response was not valid JSON") from exc


__all__ = ["TFL_API_BASE", "TflClient", "TflClientError"]
