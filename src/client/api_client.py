"""HTTP client for the worklog API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from requests.utils import quote

from src.entries.models import Series, WorkItem
from src.worklog.exceptions import ApiError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
GENERATE_TIMEOUT = 120


@dataclass(frozen=True)
class Session:
    """ログイン済みセッション。

    グローバルに保持せず、APIクライアントに明示的に渡す。
    """

    base_url: str
    token: str
    username: str

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.token}",
        }


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or "Request failed"
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or "Request failed")
    return "Request failed"


def _check(response: requests.Response) -> Any:
    if not response.ok:
        raise ApiError(response.status_code, _error_message(response))
    return response.json()


def _authenticate(base_url: str, path: str, username: str, password: str) -> Session:
    url = f"{base_url.rstrip('/')}{path}"
    try:
        response = requests.post(
            url,
            headers={"Content-Type": "application/json"},
            json={"username": username, "password": password},
            timeout=DEFAULT_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"認証リクエストに失敗: {e}")
        raise ApiError(None, f"Failed to reach {url}: {e}") from e
    data = _check(response)
    return Session(base_url=base_url.rstrip("/"), token=data["token"], username=data["username"])


def register(base_url: str, username: str, password: str) -> Session:
    """ユーザー登録してセッションを返す"""
    return _authenticate(base_url, "/api/auth/register", username, password)


def login(base_url: str, username: str, password: str) -> Session:
    """ログインしてセッションを返す"""
    return _authenticate(base_url, "/api/auth/login", username, password)


class WorklogApiClient:
    """
    worklog APIクライアント

    すべての呼び出しはコンストラクタで受け取ったセッションで認証される。
    失敗時は ApiError を送出し、自動リトライは行わない。
    """

    def __init__(self, session: Session):
        """
        Args:
            session: login()/register() が返したセッション
        """
        self.session = session

    def _url(self, path: str) -> str:
        return f"{self.session.base_url}{path}"

    def _request(self, method: str, path: str, timeout: int = DEFAULT_TIMEOUT, **kwargs: Any) -> Any:
        try:
            response = requests.request(
                method,
                self._url(path),
                headers=self.session.headers,
                timeout=timeout,
                **kwargs,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {path} に失敗: {e}")
            raise ApiError(None, f"Failed to reach server: {e}") from e
        return _check(response)

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/api/auth/me")

    # --- Items ---

    def list_items(self, series_id: Optional[str] = None) -> List[WorkItem]:
        params = {"series_id": series_id} if series_id else None
        data = self._request("GET", "/api/items", params=params)
        return [WorkItem.from_dict(entry) for entry in data]

    def upsert_item(self, item: WorkItem) -> WorkItem:
        data = self._request("POST", "/api/items", json=item.to_dict())
        return WorkItem.from_dict(data)

    def delete_item(self, item_id: str) -> bool:
        data = self._request("DELETE", f"/api/items/{quote(item_id, safe='')}")
        return bool(data.get("deleted"))

    # --- Series ---

    def list_series(self) -> List[Series]:
        data = self._request("GET", "/api/series")
        return [Series.from_dict(entry) for entry in data]

    def upsert_series(self, series: Series) -> Series:
        data = self._request("POST", "/api/series", json=series.to_dict())
        return Series.from_dict(data)

    def delete_series(self, series_id: str) -> bool:
        data = self._request("DELETE", f"/api/series/{quote(series_id, safe='')}")
        return bool(data.get("deleted"))

    # --- Stats / Generation ---

    def stats(self) -> Dict[str, Any]:
        return self._request("GET", "/api/stats")

    def generate_text(self, prompt: str, model: Optional[str] = None) -> str:
        """バックエンドのプロキシ経由でテキスト生成（SummaryRequesterから使用）"""
        payload: Dict[str, Any] = {"prompt": prompt}
        if model:
            payload["model"] = model
        data = self._request("POST", "/api/generate", timeout=GENERATE_TIMEOUT, json=payload)
        return data.get("text", "")
