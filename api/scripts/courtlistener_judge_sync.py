"""
CLI: CourtListener -> Postgres (sync de jueces).

Uso recomendado:
  - Ejecutar como job (cron / scheduled function).
  - No se integra al request/response del sitio para evitar timeouts.

Variables de entorno requeridas:
  - COURTLISTENER_API_KEY
  - DATABASE_URL (postgresql://..., postgresql+asyncpg://... se normaliza)

Ejecución:
  python scripts/courtlistener_judge_sync.py
  python scripts/courtlistener_judge_sync.py --jurisdiction CA --force-refresh
  python scripts/courtlistener_judge_sync.py --judge-id 1213 --judge-id 4410
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger
from dotenv import load_dotenv

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
# La carpeta "api" contiene el paquete raíz `app/`.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

# Cargar variables desde .env si existe (api/.env o repo_root/.env).
_REPO_ROOT = _API_ROOT.parent
load_dotenv(_API_ROOT / ".env", override=False)
load_dotenv(_REPO_ROOT / ".env", override=False)

from app.infrastructure.external.courtlistener_sync.sync_service import build_from_env
from app.infrastructure.external.courtlistener_sync.types import SyncOptions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sincroniza jueces desde CourtListener")
    parser.add_argument(
        "--judge-id",
        dest="judge_ids",
        action="append",
        default=[],
        help="Id de CourtListener a sincronizar (repetible). Si se indica, solo se sincronizan esos.",
    )
    parser.add_argument("--jurisdiction", default=None, help="Filtro de jurisdicción (p.ej. CA, US)")
    parser.add_argument("--batch-size", type=int, default=None, help="Tamaño de batch (1..25)")
    parser.add_argument(
        "--force-refresh",
        action="store_true",
        help="Refresca jueces aunque no estén vencidos.",
    )
    parser.add_argument("--discover-cap", type=int, default=None, help="Tope de jueces nuevos a descubrir")
    return parser


def options_from_args(args: argparse.Namespace) -> SyncOptions:
    return SyncOptions(
        batch_size=args.batch_size,
        jurisdiction=args.jurisdiction,
        force_refresh=args.force_refresh,
        judge_ids=tuple(args.judge_ids),
        discover_cap=args.discover_cap,
    )


def main(argv: Optional[Sequence[str]] = None, service_factory=build_from_env) -> int:
    args = build_parser().parse_args(argv)
    options = options_from_args(args)

    logger.info("Iniciando CourtListener -> Postgres sync de jueces...")
    result = service_factory().sync(options)

    print(json.dumps(result.to_dict(), indent=2))
    if result.success:
        logger.success(f"Sync OK: processed={result.processed}, created={result.created}")
        return 0

    logger.warning(f"Sync con errores: {len(result.errors)}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
