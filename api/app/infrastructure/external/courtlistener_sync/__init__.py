"""
Motor de sincronización one-way: CourtListener (/people/) -> PostgreSQL (judges).

Este paquete está diseñado para ejecutarse como job (cron / función serverless),
no como parte del request/response del sitio público.

Objetivos de diseño:
- Descubrimiento: encuentra jueces nuevos sin re-escanear los ya conocidos.
- Refresco: re-sincroniza jueces locales vencidos (staleness window).
- Presupuesto: cada invocación respeta límites duros de procesados/creados.
- Aislamiento: un registro que falla nunca aborta el batch.
- Idempotencia: se puede ejecutar N veces (o solapado) sin duplicar datos.
"""
