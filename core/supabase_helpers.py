# core/supabase_helpers.py

from core.utils import sanitize
from core.errors import supabase_error
from core.supabase_client import get_supabase_client


# =================================================================
#  SAFE SELECT / INSERT / UPDATE / DELETE
# =================================================================
# Used for every application table:
#   - profiles
#   - Log de Cotizaciones
#   - Detalle de Requerimientos / Detalle Reqs
#   - catalog tables (clientes, unidades_minera, ...)
# =================================================================

def _client():
    client = get_supabase_client()
    if client is None:
        supabase_error(RuntimeError("cliente no configurado"), "Supabase no disponible")
    return client


def safe_select(table: str, filters: dict = None, *, columns: str = "*", order: str = None, desc: bool = False):
    """Safe table SELECT returning a list of rows."""
    client = _client()

    try:
        query = client.table(table).select(columns)
        if filters:
            for key, val in filters.items():
                query = query.eq(key, val)
        if order:
            query = query.order(order, desc=desc)

        result = query.execute()
        return result.data or []

    except Exception as e:
        supabase_error(e, f"Error al leer {table}")


def safe_insert(table: str, data: dict):
    """Safe INSERT, returns the inserted row."""
    client = _client()
    cleaned = sanitize(data)

    try:
        result = client.table(table).insert(cleaned).execute()
        return result.data[0] if result.data else None

    except Exception as e:
        supabase_error(e, f"Error al insertar en {table}")


def safe_update(table: str, filters: dict, data: dict):
    """Safe UPDATE, returns the first updated row (None if nothing matched)."""
    client = _client()
    cleaned = sanitize(data)

    try:
        query = client.table(table).update(cleaned)
        for key, val in filters.items():
            query = query.eq(key, val)

        result = query.execute()
        return result.data[0] if result.data else None

    except Exception as e:
        supabase_error(e, f"Error al actualizar {table}")


def safe_delete(table: str, filters: dict):
    """Safe DELETE, returns the deleted rows."""
    client = _client()

    try:
        query = client.table(table).delete()
        for key, val in filters.items():
            query = query.eq(key, val)

        result = query.execute()
        return result.data or []

    except Exception as e:
        supabase_error(e, f"Error al eliminar en {table}")
