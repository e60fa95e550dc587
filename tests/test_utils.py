# tests/test_utils.py

"""
Tests for payload sanitizing and Supabase error mapping.
"""

from fastapi import HTTPException

from core.errors import extract_supabase_error, handle_supabase_error
from core.utils import sanitize, safe_filename


def test_sanitize_strips_and_blanks_to_none():
    cleaned = sanitize({
        "cliente": "  Antamina ",
        "observacion": "   ",
        "telefono_solicitante": "0051987654321",
        "enviado_a_tiempo": False,
        "dias_vencimiento": 0,
        "links_adjuntos": ["https://x/y.pdf"],
        "oc": None,
    })

    assert cleaned == {
        "cliente": "Antamina",
        "observacion": None,
        "telefono_solicitante": "0051987654321",
        "enviado_a_tiempo": False,
        "dias_vencimiento": 0,
        "links_adjuntos": ["https://x/y.pdf"],
        "oc": None,
    }


def test_safe_filename():
    assert safe_filename("Cotización Técnica (v2).pdf") == "Cotizacion_Tecnica__v2_.pdf"
    assert safe_filename("plano-final_01.dwg") == "plano-final_01.dwg"


def test_extract_supabase_error_prefers_message():
    class ApiError(Exception):
        message = "duplicate key value violates unique constraint"

    assert extract_supabase_error(ApiError("other")) == "duplicate key value violates unique constraint"
    assert extract_supabase_error(RuntimeError("boom")) == "boom"


def test_handle_supabase_error_mapping():
    assert handle_supabase_error(Exception("duplicate key"), "Alta").status_code == 409
    assert handle_supabase_error(Exception("violates foreign key constraint"), "Alta").status_code == 400
    assert handle_supabase_error(Exception('relation "x" does not exist'), "Alta").status_code == 404

    generic = handle_supabase_error(Exception("timeout"), "Error al cargar")
    assert generic.status_code == 500
    assert generic.detail == "Error al cargar"


def test_handle_supabase_error_passes_http_exceptions_through():
    original = HTTPException(409, "ya existe")
    assert handle_supabase_error(original, "Alta") is original
