# tests/test_quote_codes.py

"""
Tests for quotation code suggestion and validation.
"""

import pytest
from unittest.mock import Mock

from core.quote_codes import (
    QUOTE_CODE_LIKE,
    format_quote_code,
    latest_quote_code,
    suggest_next_code,
)
from models.cotizacion import CotizacionCreate


def test_format_pads_sequence():
    assert format_quote_code(2025, 7) == "FOR-EKA-PRO-3_2025-007"
    assert format_quote_code(2025, 1234) == "FOR-EKA-PRO-3_2025-1234"


@pytest.mark.parametrize(
    "last, expected",
    [
        ("FOR-EKA-PRO-3_2025-041", "FOR-EKA-PRO-3_2025-042"),
        ("FOR-EKA-PRO-3_2024-119", "FOR-EKA-PRO-3_2025-001"),
        ("for-eka-pro-3_2025-009", "FOR-EKA-PRO-3_2025-010"),
        ("COT-2025-010", "FOR-EKA-PRO-3_2025-001"),
        (None, "FOR-EKA-PRO-3_2025-001"),
        ("", "FOR-EKA-PRO-3_2025-001"),
    ],
)
def test_suggest_next_code(last, expected):
    assert suggest_next_code(last, year=2025) == expected


def test_latest_quote_code_reads_highest_code():
    client = Mock()
    query = client.table.return_value
    query.select.return_value = query
    query.ilike.return_value = query
    query.order.return_value = query
    query.limit.return_value = query
    query.execute.return_value = Mock(data=[{"cotizacion": "FOR-EKA-PRO-3_2025-012"}])

    assert latest_quote_code(client, "Log de Cotizaciones") == "FOR-EKA-PRO-3_2025-012"
    client.table.assert_called_with("Log de Cotizaciones")
    query.ilike.assert_called_with("cotizacion", QUOTE_CODE_LIKE)
    query.order.assert_called_with("cotizacion", desc=True)


def test_latest_quote_code_empty_log():
    client = Mock()
    query = client.table.return_value
    for method in ("select", "ilike", "order", "limit"):
        getattr(query, method).return_value = query
    query.execute.return_value = Mock(data=[])

    assert latest_quote_code(client, "Log de Cotizaciones") is None


# -----------------------------------------------------
# Form validation
# -----------------------------------------------------
def test_create_model_requires_code_format():
    with pytest.raises(ValueError, match="FOR-EKA-PRO-3_2025-001"):
        CotizacionCreate(cotizacion="COT-001")


def test_create_model_normalizes_blank_inputs():
    model = CotizacionCreate(
        cotizacion="  FOR-EKA-PRO-3_2025-003 ",
        fecha_entrega="",
        dias_vencimiento=" ",
        links_adjuntos=[],
        fecha_invitacion="2025-03-14",
    )

    assert model.cotizacion == "FOR-EKA-PRO-3_2025-003"
    assert model.fecha_entrega is None
    assert model.dias_vencimiento is None
    assert model.links_adjuntos is None
    assert model.fecha_invitacion.isoformat() == "2025-03-14"
