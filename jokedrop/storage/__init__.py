"""Storage interfaces and backends."""
