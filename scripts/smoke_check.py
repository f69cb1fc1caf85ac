#!/usr/bin/env python3
"""
Smoke check de un despliegue de Caja API.

Verifica health, CORS para los orígenes esperados y, si se pasan
credenciales, login + listado de series de comprobante.

Uso:
    python scripts/smoke_check.py http://localhost:4001 [correo] [password]
"""

import sys
from typing import Dict, List, Optional, Tuple

import requests

TIMEOUT = 10

# (origen, debe_permitirse)
ORIGINS: List[Tuple[Optional[str], bool]] = [
    ("http://localhost:3000", True),
    ("http://localhost:4001", True),
    ("https://malicious-site.com", False),
    (None, True),
]


def check_health(base_url: str) -> Dict:
    response = requests.get(f"{base_url}/api/health", timeout=TIMEOUT)
    ok = response.status_code == 200 and response.json().get("status") == "healthy"
    return {"name": "health", "status": "PASS" if ok else "FAIL", "detail": response.status_code}


def check_origin(base_url: str, origin: Optional[str], should_be_allowed: bool) -> Dict:
    headers = {}
    if origin:
        headers["Origin"] = origin
        headers["Access-Control-Request-Method"] = "POST"
        headers["Access-Control-Request-Headers"] = "Authorization,Content-Type"

    requests.options(f"{base_url}/api/login", headers=headers, timeout=TIMEOUT)
    response = requests.get(
        f"{base_url}/api/health",
        headers={"Origin": origin} if origin else {},
        timeout=TIMEOUT
    )

    allowed_origin = response.headers.get("Access-Control-Allow-Origin")
    allowed = allowed_origin in (origin, "*") or (origin is None and response.status_code == 200)

    return {
        "name": f"cors {origin or 'sin origen'}",
        "status": "PASS" if allowed == should_be_allowed else "FAIL",
        "detail": allowed_origin
    }


def check_login(base_url: str, correo: str, password: str) -> List[Dict]:
    response = requests.post(
        f"{base_url}/api/login",
        json={"correo": correo, "password": password},
        timeout=TIMEOUT
    )
    if response.status_code != 200:
        return [{"name": "login", "status": "FAIL", "detail": response.json().get("message")}]

    token = response.json()["token"]
    series = requests.get(
        f"{base_url}/api/comprobantes",
        headers={"Authorization": f"Bearer {token}"},
        timeout=TIMEOUT
    )
    return [
        {"name": "login", "status": "PASS", "detail": response.json()["user"]["rol"]},
        {
            "name": "series de comprobante",
            "status": "PASS" if series.status_code == 200 and series.json() else "FAIL",
            "detail": [s["ccoddocu"] for s in series.json()] if series.status_code == 200 else series.status_code
        },
    ]


def run(base_url: str, correo: Optional[str] = None, password: Optional[str] = None) -> List[Dict]:
    results = []
    try:
        results.append(check_health(base_url))
        for origin, should_be_allowed in ORIGINS:
            results.append(check_origin(base_url, origin, should_be_allowed))
        if correo and password:
            results.extend(check_login(base_url, correo, password))
    except requests.exceptions.RequestException as e:
        results.append({"name": "conexión", "status": "ERROR", "detail": str(e)})
    return results


if __name__ == "__main__":
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:4001"
    correo = sys.argv[2] if len(sys.argv) > 2 else None
    password = sys.argv[3] if len(sys.argv) > 3 else None

    print(f"Smoke check: {base_url}")
    results = run(base_url.rstrip("/"), correo, password)
    for result in results:
        print(f"[{result['status']}] {result['name']}: {result['detail']}")

    failed = [r for r in results if r["status"] != "PASS"]
    print(f"\n{len(results) - len(failed)}/{len(results)} OK")
    if failed:
        sys.exit(1)
