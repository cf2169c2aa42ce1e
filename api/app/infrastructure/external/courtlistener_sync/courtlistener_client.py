"""
Cliente mínimo de CourtListener REST API v4 (sin SDKs externos).

Requisitos cubiertos:
- requests
- paginación por cursor (`next` URL, envuelto en ContinuationToken)
- rate-limit/backoff (429, 5xx)
- 404 en detalle -> None (el motor decide que es NotFound)
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional

import requests
from loguru import logger

from app.shared.exceptions.sync import SetupError, UpstreamApiError

from .ports import UpstreamJudgeClient
from .types import ContinuationToken, ExternalRecord, UpstreamPage


@dataclass(frozen=True)
class CourtListenerCredentials:
    token: str


def build_list_params(
    *,
    ordering: str,
    filters: Optional[dict[str, Any]],
    page_size: int,
) -> dict[str, Any]:
    """
    Construye los query params de la primera página del listado /people/.

    Los filtros con valor None o "" se descartan (igual que el cliente web).
    """
    params: dict[str, Any] = {
        "ordering": ordering,
        "page_size": page_size,
        "format": "json",
    }
    for key, value in (filters or {}).items():
        if value is None or value == "":
            continue
        params[key] = value
    return params


class CourtListenerClient(UpstreamJudgeClient):
    """
    Cliente HTTP de CourtListener para el recurso /people/.

    Importante:
    - No reintenta por su cuenta errores 4xx (salvo 429): eso es config/auth mal.
    - El cursor devuelto es opaco para el motor; aquí es la URL absoluta `next`.
    """

    def __init__(
        self,
        credentials: CourtListenerCredentials,
        *,
        session: Optional[requests.Session] = None,
        base_url: str = "https://www.courtlistener.com/api/rest/v4",
        timeout_s: int = 30,
        page_size: int = 100,
        max_retries: int = 6,
        min_backoff_s: float = 0.8,
        max_backoff_s: float = 20.0,
        sleep=time.sleep,
    ) -> None:
        if not credentials.token:
            raise SetupError("COURTLISTENER_API_KEY es obligatoria para el sync de jueces")
        self._creds = credentials
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._page_size = page_size
        self._max_retries = max_retries
        self._min_backoff_s = min_backoff_s
        self._max_backoff_s = max_backoff_s
        self._sleep = sleep
        self._session = session or requests.Session()

    def list_changed(
        self,
        cursor: Optional[ContinuationToken] = None,
        *,
        ordering: str,
        filters: Optional[dict[str, Any]] = None,
    ) -> UpstreamPage:
        """
        Página del listado /people/ ordenada por `ordering`.

        - Primera página: construye params con filtros
        - Siguientes: usa la URL `next` tal cual (ya trae los params)
        """
        if cursor is None:
            url = f"{self._base_url}/people/"
            params: Optional[dict[str, Any]] = build_list_params(
                ordering=ordering, filters=filters, page_size=self._page_size
            )
        else:
            url = str(cursor.value)
            params = None

        payload = self._request_json("GET", url, params=params)
        if payload is None:
            raise UpstreamApiError(f"CourtListener devolvió 404 para el listado: {url}", http_status=404)

        results = []
        for item in payload.get("results") or []:
            try:
                results.append(ExternalRecord.from_payload(item))
            except ValueError as e:
                # Caso raro; se omite el item pero se deja rastro.
                logger.warning(f"Item de listado CourtListener inválido: {e}")

        next_url = payload.get("next")
        return UpstreamPage(
            results=results,
            next=ContinuationToken(next_url) if next_url else None,
        )

    def get_by_id(self, external_id: str) -> Optional[ExternalRecord]:
        url = f"{self._base_url}/people/{external_id}/"
        payload = self._request_json("GET", url, params={"format": "json"})
        if payload is None:
            return None
        return ExternalRecord.from_payload(payload)

    def _request_json(
        self, method: str, url: str, *, params: Optional[dict[str, Any]]
    ) -> Optional[dict[str, Any]]:
        """
        Request HTTP con backoff para 429/5xx.

        Estrategia:
        - 404: retorna None (el caller decide).
        - 429: respeta Retry-After si existe, si no exponencial con jitter simple.
        - 5xx: exponencial con jitter.
        - 4xx (no 429/404): error inmediato (config/auth mal).
        """
        headers = {
            "Authorization": f"Token {self._creds.token}",
            "Accept": "application/json",
            "User-Agent": "JudgeFinder/1.0 (https://judgefinder.com; contact@judgefinder.com)",
        }

        for attempt in range(self._max_retries + 1):
            resp = self._session.request(
                method=method,
                url=url,
                params=params,
                headers=headers,
                timeout=self._timeout_s,
            )

            if 200 <= resp.status_code < 300:
                return resp.json()

            if resp.status_code == 404:
                return None

            # Errores recuperables
            if resp.status_code == 429 or 500 <= resp.status_code < 600:
                if attempt >= self._max_retries:
                    raise UpstreamApiError(
                        f"CourtListener error {resp.status_code} tras {attempt} reintentos: {resp.text}",
                        http_status=resp.status_code,
                    )

                retry_after = resp.headers.get("Retry-After")
                if retry_after:
                    try:
                        sleep_s = float(retry_after)
                    except ValueError:
                        sleep_s = self._min_backoff_s
                else:
                    # Exponencial simple + jitter proporcional
                    base = min(self._max_backoff_s, self._min_backoff_s * (2**attempt))
                    sleep_s = base + (0.15 * base)

                logger.warning(
                    f"CourtListener {resp.status_code} en {url}; reintento {attempt + 1} en {sleep_s:.1f}s"
                )
                self._sleep(sleep_s)
                continue

            # Errores no recuperables
            raise UpstreamApiError(
                f"CourtListener request falló {resp.status_code}: {resp.text}",
                http_status=resp.status_code,
            )

        raise UpstreamApiError(f"CourtListener request sin respuesta: {url}")
