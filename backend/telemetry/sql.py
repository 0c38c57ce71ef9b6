from __future__ import annotations

CREATE_PASSES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS render_passes (
  ts_ms BIGINT,
  endpoint TEXT,
  trigger TEXT,
  scenario TEXT,
  view_zoom DOUBLE,
  mode TEXT,
  stats_json TEXT
);
"""

SUMMARY_SQL_TEMPLATE = """
SELECT
  mode,
  endpoint,
  COUNT(*) AS n,
  AVG(try_cast(json_extract(stats_json, '$.timingsMs.total') AS DOUBLE)) AS avg_total_ms,
  quantile_cont(try_cast(json_extract(stats_json, '$.timingsMs.total') AS DOUBLE), 0.50) AS p50_total_ms,
  quantile_cont(try_cast(json_extract(stats_json, '$.timingsMs.total') AS DOUBLE), 0.95) AS p95_total_ms,
  AVG(try_cast(json_extract(stats_json, '$.markers.planned') AS DOUBLE)) AS avg_markers,
  AVG(try_cast(json_extract(stats_json, '$.markers.created') AS DOUBLE)) AS avg_created
FROM render_passes
{where_sql}
GROUP BY mode, endpoint
ORDER BY mode, endpoint
"""

SLOWEST_SQL_TEMPLATE = """
SELECT
  ts_ms,
  mode,
  endpoint,
  scenario,
  try_cast(json_extract(stats_json, '$.timingsMs.total') AS DOUBLE) AS total_ms,
  try_cast(json_extract(stats_json, '$.markers.planned') AS BIGINT) AS markers,
  view_zoom
FROM render_passes
WHERE {where_sql}
ORDER BY total_ms DESC
LIMIT ?
"""

INSERT_PASSES_SQL = """
INSERT INTO render_passes
  (ts_ms, endpoint, trigger, scenario, view_zoom, mode, stats_json)
VALUES (?, ?, ?, ?, ?, ?, ?)
"""
