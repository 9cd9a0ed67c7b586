from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Mapping, Literal

import httpx


HttpMethod = Literal["GET", "POST", "DELETE"]


@dataclass(frozen=True)
class HttpResult:
    ok: bool
    status_code: int | None
    detail: dict[str, Any]

    error_code: str | None = None
    error_message: str | None = None

    elapsed_ms: int | None = None
    request_id: str | None = None


def _is_json_response(resp: httpx.Response) -> bool:
    ct = (resp.headers.get("content-type") or "").lower()
    return "application/json" in ct or ct.endswith("+json")


def _cap_text(s: str, *, max_chars: int) -> str:
    if len(s) <= max_chars:
        return s
    return s[:max_chars] + f"...(truncated, {len(s)} chars)"


def flatten_form(params: Mapping[str, Any], prefix: str = "") -> list[tuple[str, str]]:
    """
    Encode nested params with bracket notation, e.g.
    {"recurring": {"interval": "month"}} -> [("recurring[interval]", "month")].
    None values are dropped; lists use "key[]".
    """
    out: list[tuple[str, str]] = []
    for key, value in params.items():
        full = f"{prefix}[{key}]" if prefix else str(key)
        if value is None:
            continue
        if isinstance(value, Mapping):
            out.extend(flatten_form(value, full))
        elif isinstance(value, (list, tuple)):
            out.extend((f"{full}[]", _form_value(v)) for v in value)
        else:
            out.append((full, _form_value(value)))
    return out


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(getattr(value, "value", value))


class ProviderHttpClient:
    """
    HTTP client wrapper for the billing provider's form-encoded REST API.

    - Uses one AsyncClient instance (connection pooling); close it with aclose()
      or use it as an async context manager.
    - Does NOT retry: callers log the failure and move on.
    - Returns a structured result; provider error codes land in error_code.
    """

    def __init__(
        self,
        *,
        base_url: str,
        secret_key: str,
        api_version: str | None = None,
        timeout_seconds: float = 20.0,
        max_response_body_chars: int = 20_000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Authorization": f"Bearer {secret_key}"}
        if api_version:
            headers["Stripe-Version"] = api_version
        self._max_body = max_response_body_chars
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    async def __aenter__(self) -> "ProviderHttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        *,
        method: HttpMethod,
        path: str,
        params: Mapping[str, Any] | None = None,
    ) -> HttpResult:
        form = flatten_form(params or {})
        started = time.monotonic()
        try:
            if method == "GET":
                resp = await self._client.request(method, path, params=form)
            else:
                data: dict[str, list[str]] = {}
                for key, value in form:
                    data.setdefault(key, []).append(value)
                resp = await self._client.request(method, path, data=data or None)
        except httpx.TimeoutException as e:
            return HttpResult(
                ok=False,
                status_code=None,
                detail={"error": "timeout"},
                error_code="TIMEOUT",
                error_message=str(e),
            )
        except httpx.RequestError as e:
            # DNS errors, connection refused, TLS, etc.
            return HttpResult(
                ok=False,
                status_code=None,
                detail={"error": "request_error"},
                error_code="REQUEST_ERROR",
                error_message=str(e),
            )

        detail: dict[str, Any]
        if _is_json_response(resp):
            try:
                parsed = resp.json()
                detail = parsed if isinstance(parsed, dict) else {"data": parsed}
            except ValueError:
                detail = {"raw": _cap_text(resp.text, max_chars=self._max_body)}
        else:
            detail = {
                "raw": _cap_text(resp.text, max_chars=self._max_body),
                "content_type": resp.headers.get("content-type"),
            }

        elapsed_ms = int((time.monotonic() - started) * 1000)
        request_id = resp.headers.get("request-id") or None

        if 200 <= resp.status_code < 300:
            return HttpResult(
                ok=True,
                status_code=resp.status_code,
                detail=detail,
                elapsed_ms=elapsed_ms,
                request_id=request_id,
            )

        # Provider errors look like {"error": {"code": "...", "message": "...", "type": "..."}}
        err = detail.get("error") if isinstance(detail.get("error"), dict) else {}
        return HttpResult(
            ok=False,
            status_code=resp.status_code,
            detail=detail,
            error_code=err.get("code") or f"HTTP_{resp.status_code}",
            error_message=err.get("message") or f"HTTP {resp.status_code}",
            elapsed_ms=elapsed_ms,
            request_id=request_id,
        )

    # helpers
    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> HttpResult:
        return await self.request(method="GET", path=path, params=params)

    async def post(self, path: str, params: Mapping[str, Any] | None = None) -> HttpResult:
        return await self.request(method="POST", path=path, params=params)
