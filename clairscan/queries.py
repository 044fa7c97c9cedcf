"""Builders for bulk SQL statements against the PostgreSQL store."""

from __future__ import annotations

__all__ = [
    "quote_identifier",
    "query_string",
    "query_insert",
    "query_persist",
    "query_search_last_deleted_vulnerability_id",
    "query_search_not_deleted_vulnerability_id",
    "query_search_feature_id",
    "query_search_namespaced_feature",
    "query_search_namespace",
    "query_insert_notifications",
    "query_persist_feature",
    "query_persist_layer_feature",
    "query_persist_namespace",
    "query_persist_layer_listers",
    "query_persist_layer_detectors",
    "query_persist_layer_namespace",
    "query_persist_namespaced_feature",
    "query_persist_vulnerability_affected_namespaced_feature",
    "query_persist_layer",
    "query_invalidate_vulnerability_cache",
]


def _sql(*parts: str) -> str:
    return " ".join(parts)


def quote_identifier(name: str) -> str:
    """Quote ``name`` as a PostgreSQL identifier.

    Anything from the first NUL character on is dropped and embedded double
    quotes are doubled.
    """
    name = name.split("\x00", 1)[0]
    return '"' + name.replace('"', '""') + '"'


def query_string(key_size: int, array_size: int) -> str:
    """Build ``array_size`` tuples of ``key_size`` numbered placeholders.

    Both sizes must be greater than zero.
    """
    if array_size <= 0 or key_size <= 0:
        raise ValueError(
            "Bulk Query requires size of element tuple and number of elements "
            "to be greater than 0"
        )
    tuples = (
        "(" + ",".join(f"${row * key_size + col + 1}" for col in range(key_size)) + ")"
        for row in range(array_size)
    )
    return ",".join(tuples)


def query_insert(count: int, table: str, *columns: str) -> str:
    """Build a bulk INSERT of ``count`` rows into ``table``."""
    cols = ",".join(quote_identifier(c) for c in columns)
    values = query_string(len(columns), count)
    return f"INSERT INTO {quote_identifier(table)} ({cols}) VALUES {values}"


def query_persist(count: int, table: str, constraint: str, *columns: str) -> str:
    """Build a bulk INSERT that ignores conflicts, optionally on a named constraint."""
    ct = f"ON CONSTRAINT {constraint}" if constraint else ""
    return f"{query_insert(count, table, *columns)} ON CONFLICT {ct} DO NOTHING"


def query_search_last_deleted_vulnerability_id(count: int) -> str:
    """Find the most recently deleted vulnerability for each (name, namespace) key."""
    keys = query_string(2, count)
    inner = _sql(
        "SELECT v.id AS vid, v.name AS vname, n.name AS nname,",
        "row_number() OVER (PARTITION by (v.name, n.name) ORDER BY v.deleted_at DESC)",
        "AS rownum",
        "FROM vulnerability AS v, namespace AS n",
        "WHERE v.namespace_id = n.id",
        f"AND (v.name, n.name) IN ( {keys} )",
        "AND v.deleted_at IS NOT NULL",
    )
    return f"SELECT vid, vname, nname FROM ({inner}) tmp WHERE rownum <= 1"


def query_search_not_deleted_vulnerability_id(count: int) -> str:
    """Find live vulnerabilities for each (name, namespace) key."""
    keys = query_string(2, count)
    return _sql(
        "SELECT v.id, v.name, n.name FROM vulnerability AS v, namespace AS n",
        f"WHERE v.namespace_id = n.id AND (v.name, n.name) IN ({keys})",
        "AND v.deleted_at IS NULL",
    )


def query_search_feature_id(feature_count: int) -> str:
    """Find features by (name, version, version_format)."""
    keys = query_string(3, feature_count)
    return _sql(
        "SELECT id, name, version, version_format FROM Feature",
        f"WHERE (name, version, version_format) IN ({keys})",
    )


def query_search_namespaced_feature(nsf_count: int) -> str:
    """Find namespaced features by (name, version, version_format, namespace)."""
    keys = query_string(4, nsf_count)
    return _sql(
        "SELECT nf.id, f.name, f.version, f.version_format, n.name",
        "FROM namespaced_feature AS nf, feature AS f, namespace AS n",
        "WHERE nf.feature_id = f.id",
        "AND nf.namespace_id = n.id",
        "AND n.version_format = f.version_format",
        f"AND (f.name, f.version, f.version_format, n.name) IN ({keys})",
    )


def query_search_namespace(ns_count: int) -> str:
    """Find namespaces by (name, version_format)."""
    keys = query_string(2, ns_count)
    return _sql(
        "SELECT id, name, version_format FROM namespace",
        f"WHERE (name, version_format) IN ({keys})",
    )


def query_insert_notifications(count: int) -> str:
    return query_insert(
        count,
        "vulnerability_notification",
        "name",
        "created_at",
        "old_vulnerability_id",
        "new_vulnerability_id",
    )


def query_persist_feature(count: int) -> str:
    return query_persist(
        count,
        "feature",
        "feature_name_version_version_format_key",
        "name",
        "version",
        "version_format",
    )


def query_persist_layer_feature(count: int) -> str:
    return query_persist(
        count,
        "layer_feature",
        "layer_feature_layer_id_feature_id_key",
        "layer_id",
        "feature_id",
    )


def query_persist_namespace(count: int) -> str:
    return query_persist(
        count,
        "namespace",
        "namespace_name_version_format_key",
        "name",
        "version_format",
    )


def query_persist_layer_listers(count: int) -> str:
    return query_persist(
        count,
        "layer_lister",
        "layer_lister_layer_id_lister_key",
        "layer_id",
        "lister",
    )


def query_persist_layer_detectors(count: int) -> str:
    return query_persist(
        count,
        "layer_detector",
        "layer_detector_layer_id_detector_key",
        "layer_id",
        "detector",
    )


def query_persist_layer_namespace(count: int) -> str:
    return query_persist(
        count,
        "layer_namespace",
        "layer_namespace_layer_id_namespace_id_key",
        "layer_id",
        "namespace_id",
    )


def query_persist_namespaced_feature(count: int) -> str:
    return query_persist(
        count,
        "namespaced_feature",
        "namespaced_feature_namespace_id_feature_id_key",
        "feature_id",
        "namespace_id",
    )


def query_persist_vulnerability_affected_namespaced_feature(count: int) -> str:
    return query_persist(
        count,
        "vulnerability_affected_namespaced_feature",
        "vulnerability_affected_namesp_vulnerability_id_namespaced_f_key",
        "vulnerability_id",
        "namespaced_feature_id",
        "added_by",
    )


def query_persist_layer(count: int) -> str:
    return query_persist(count, "layer", "", "hash")


def query_invalidate_vulnerability_cache(count: int) -> str:
    keys = query_string(1, count)
    return _sql(
        "DELETE FROM vulnerability_affected_feature",
        f"WHERE vulnerability_id IN ({keys})",
    )